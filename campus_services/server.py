"""
server.py — Low-level MCP Server for the campus services tracker
================================================================
What this file does:
  1. Builds the CampusState (directory + store, seeded from fixtures)
  2. Creates a low-level mcp Server with list_tools and call_tool handlers
  3. Wraps the server in a StreamableHTTPSessionManager
  4. Mounts it on a Starlette app at /mcp
  5. Serves with uvicorn (port from CAMPUS_PORT, default 8001)

The tools themselves live in tools/. This file only wires them up.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.routing import Mount

from . import config
from .data import CampusState, bootstrap
from .tools import build_tools

logger = logging.getLogger(__name__)


def create_server(state: CampusState) -> Server:
    tools = build_tools(state)

    # ── Lifespan ──────────────────────────────────────────────────────────────
    # Called once per server run. The state already exists, so we only log.

    @asynccontextmanager
    async def server_lifespan(server: Server) -> AsyncIterator[dict]:
        logger.info(
            "Campus services MCP server starting (%d users, %d requests)",
            len(state.directory),
            len(state.store),
        )
        try:
            yield {}
        finally:
            logger.info("Campus services MCP server shutting down.")

    server = Server(config.SERVER_NAME, lifespan=server_lifespan)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        """Return all tools from the registry to any connecting client."""
        return [entry["tool"] for entry in tools.values()]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        """Dispatch an incoming tool call to the correct handler."""
        if name not in tools:
            raise ValueError(f"Unknown tool: {name}")
        handler = tools[name]["handler"]
        try:
            return await handler(arguments or {})
        except Exception as exc:
            # MCP turns the raised error into an isError result for the client
            logger.warning("Tool %s failed: %s: %s", name, type(exc).__name__, exc)
            raise

    return server


def create_app(state: Optional[CampusState] = None) -> Starlette:
    state = state or bootstrap(seed=config.SEED_FIXTURES)
    session_manager = StreamableHTTPSessionManager(create_server(state))

    @asynccontextmanager
    async def app_lifespan(app: Starlette):
        async with session_manager.run():
            logger.info("Server is running on http://%s:%d/mcp", config.HOST, config.PORT)
            yield

    # The client must connect to http://<host>:<port>/mcp
    app = Starlette(
        routes=[
            Mount("/mcp", app=session_manager.handle_request),
        ],
        lifespan=app_lifespan,
    )
    app.state.campus = state
    return app


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(), host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
