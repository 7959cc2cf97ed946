"""Helpers shared by the user and request tool handlers."""

import json
from typing import Any, Iterable, Optional

from mcp import types

from ..data import CampusState
from ..errors import PermissionDeniedError, ValidationError
from ..schema import UserProfile


def text_result(payload: Any) -> list[types.TextContent]:
    """Wrap a JSON-serialisable payload as the single text block MCP expects."""
    return [types.TextContent(type="text", text=json.dumps(payload, indent=2, default=str))]


def optional_arg(arguments: dict, name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def required_arg(arguments: dict, name: str) -> str:
    value = optional_arg(arguments, name)
    if value is None:
        raise ValidationError(f"{name} is required")
    return value


def require_actor(state: CampusState, arguments: dict, allowed_roles: Iterable[str]) -> UserProfile:
    """Resolve actor_id to a profile and check its role may use the tool."""
    actor = state.directory.get(required_arg(arguments, "actor_id"))
    allowed = tuple(allowed_roles)
    if actor.role not in allowed:
        raise PermissionDeniedError(f"role {actor.role!r} may not do this (needs one of: {', '.join(allowed)})")
    return actor
