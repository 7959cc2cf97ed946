"""
client.py — Direct MCP client for the campus services tracker
=============================================================
Connects to a running server and walks one ticket through its whole life
by calling tools directly:

  1. A student logs in and files a request
  2. Staff list the open requests and pick it up, then resolve it
  3. The student sees the staff remarks on their own list
  4. The admin pulls the analytics summary

Usage:
    Terminal 1:  campus-services-server
    Terminal 2:  campus-services-demo
"""

import asyncio
import json
from typing import Any

from mcp import ClientSession
from mcp.client.streamable_http import streamable_http_client
import mcp.types as mcp_types

from . import config


class ToolCallError(RuntimeError):
    """The server reported an error result for a tool call."""


def parse_tool_result(result: mcp_types.CallToolResult) -> Any:
    """Return the JSON payload of a tool result, or raise if the call failed."""
    text = result.content[0].text if result.content else ""
    if result.isError:
        raise ToolCallError(text or "Unknown error")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        # export_requests_csv answers with plain CSV text
        return text


def print_section(title: str) -> None:
    """Print a visible section header to make output easy to read."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


async def call(session: ClientSession, tool_name: str, /, **arguments: Any) -> Any:
    return parse_tool_result(await session.call_tool(name=tool_name, arguments=arguments))


async def walkthrough(session: ClientSession) -> None:
    student = await call(session, "authenticate_user", identifier="CS2023001", role="student")
    staff = await call(session, "authenticate_user", identifier="anjali.g@college.edu", role="staff")
    admin = await call(session, "authenticate_user", identifier="a1", role="admin")
    print_section("Logged in")
    for profile in (student, staff, admin):
        print(f"  {profile['role']:<8} {profile['id']:<4} {profile['name']}")

    print_section("Student files a request")
    ticket = await call(
        session,
        "submit_request",
        actor_id=student["id"],
        service_type="Canteen Issue",
        description="Card payments failing at the canteen counter.",
        location="Main canteen",
    )
    print(f"  {ticket['id']}  {ticket['service_type']}  [{ticket['status']}]")

    print_section("Staff triage")
    open_list = await call(session, "list_requests", actor_id=staff["id"], status="Submitted")
    for item in open_list["requests"]:
        print(f"  {item['date']}  {item['id']:<14} {item['student_name']:<16} {item['service_type']}")
    await call(session, "update_request_status", actor_id=staff["id"], request_id=ticket["id"], status="In Progress")
    resolved = await call(
        session,
        "update_request_status",
        actor_id=staff["id"],
        request_id=ticket["id"],
        status="Resolved",
        remarks="Card reader replaced.",
    )
    print(f"  {resolved['id']}: {resolved['old_status']} -> {resolved['status']}")

    print_section("Student view")
    mine = await call(session, "list_requests", actor_id=student["id"])
    for item in mine["requests"]:
        note = f"  ({item['remarks']})" if item["remarks"] else ""
        print(f"  {item['date']}  {item['service_type']:<24} [{item['status']}]{note}")

    print_section("Admin analytics")
    summary = await call(session, "request_analytics", actor_id=admin["id"])
    print(f"  Total requests  : {summary['total']}")
    print(f"  Status counts   : {summary['status_counts']}")
    print(f"  Resolution rate : {summary['resolution_rate']}%")
    for category in summary["top_categories"]:
        print(f"    {category['service_type']:<26} {category['count']} ({category['percentage']}%)")


async def main() -> None:
    async with streamable_http_client(config.SERVER_URL) as (read, write, _):
        async with ClientSession(read, write) as session:
            init_result = await session.initialize()
            print_section("Server Info (from handshake)")
            print(f"  Server name   : {init_result.serverInfo.name}")
            print(f"  Server version: {init_result.serverInfo.version}")

            tools_result = await session.list_tools()
            print_section("Available tools")
            for tool in tools_result.tools:
                print(f"  - {tool.name}")

            await walkthrough(session)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
