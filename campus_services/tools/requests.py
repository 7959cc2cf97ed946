"""
tools/requests.py — MCP tools for service requests
==================================================
Six tools live here:
  - submit_request         : a student files a new request
  - update_request_status  : staff/admin move a request to a new status
  - list_requests          : role-scoped list, newest first, with filters
  - get_request            : one request by id
  - request_analytics      : status counts, top categories, resolution rate
  - export_requests_csv    : every request as a CSV report (admin only)

Every tool takes an actor_id. The actor's role decides what it may do and
what it may see; the store itself never checks.
"""

from mcp import types

from ..analytics import aggregate, render_csv_report
from ..config import TOP_CATEGORIES
from ..data import CampusState
from ..errors import PermissionDeniedError, ValidationError
from ..schema import REQUEST_STATUSES, SERVICE_TYPES, STAFF_ROLES
from .common import optional_arg, require_actor, required_arg, text_result

ACTOR_ID_PROPERTY = {"type": "string", "description": "Id of the logged-in user (e.g. s1, st1, a1)"}


# ── submit_request ────────────────────────────────────────────────────────────

submit_request_input_schema = {
    "type": "object",
    "properties": {
        "actor_id": ACTOR_ID_PROPERTY,
        "service_type": {"type": "string", "enum": list(SERVICE_TYPES)},
        "description": {"type": "string", "description": "What is wrong, in the student's words"},
        "location": {"type": "string", "description": "Optional building / room"},
    },
    "required": ["actor_id", "service_type", "description"],
}

submit_request_tool = types.Tool(
    name="submit_request",
    description=(
        "File a new campus service request as a student. The request starts as "
        "'Submitted' and records the student's current name."
    ),
    inputSchema=submit_request_input_schema,
)


async def submit_request(arguments: dict, state: CampusState) -> list[types.TextContent]:
    student = require_actor(state, arguments, ["student"])
    request = state.store.submit(
        student_id=student.id,
        student_name=student.name,
        service_type=required_arg(arguments, "service_type"),
        description=arguments.get("description", ""),
        location=optional_arg(arguments, "location"),
    )
    return text_result(request.model_dump(mode="json"))


# ── update_request_status ─────────────────────────────────────────────────────

update_request_status_input_schema = {
    "type": "object",
    "properties": {
        "actor_id": ACTOR_ID_PROPERTY,
        "request_id": {"type": "string", "description": "The request to update (e.g. req1)"},
        "status": {"type": "string", "enum": list(REQUEST_STATUSES)},
        "remarks": {"type": "string", "description": "Optional note for the student; blank keeps the old one"},
    },
    "required": ["actor_id", "request_id", "status"],
}

update_request_status_tool = types.Tool(
    name="update_request_status",
    description=(
        "Set a request's status to Submitted, In Progress or Resolved, optionally "
        "with remarks. Staff and admins only."
    ),
    inputSchema=update_request_status_input_schema,
)


async def update_request_status(arguments: dict, state: CampusState) -> list[types.TextContent]:
    require_actor(state, arguments, STAFF_ROLES)
    old_status, request = state.store.transition(
        required_arg(arguments, "request_id"),
        required_arg(arguments, "status"),
        optional_arg(arguments, "remarks"),
    )
    result = request.model_dump(mode="json")
    result["old_status"] = old_status
    return text_result(result)


# ── list_requests ─────────────────────────────────────────────────────────────

list_requests_input_schema = {
    "type": "object",
    "properties": {
        "actor_id": ACTOR_ID_PROPERTY,
        "status": {"type": "string", "enum": ["All", *REQUEST_STATUSES]},
        "search": {"type": "string", "description": "Matches student name, service type or request id"},
    },
    "required": ["actor_id"],
}

list_requests_tool = types.Tool(
    name="list_requests",
    description=(
        "List service requests, newest first. Students see only their own; staff "
        "and admins see all. Optionally filter by status and search text."
    ),
    inputSchema=list_requests_input_schema,
)


async def list_requests(arguments: dict, state: CampusState) -> list[types.TextContent]:
    actor = require_actor(state, arguments, ("student", *STAFF_ROLES))
    requests = state.store.list_for(
        actor.role,
        actor.id,
        {"status": optional_arg(arguments, "status"), "search": optional_arg(arguments, "search")},
    )
    result = {
        "count": len(requests),
        "requests": [r.model_dump(mode="json") for r in requests],
    }
    return text_result(result)


# ── get_request ───────────────────────────────────────────────────────────────

get_request_input_schema = {
    "type": "object",
    "properties": {
        "actor_id": ACTOR_ID_PROPERTY,
        "request_id": {"type": "string"},
    },
    "required": ["actor_id", "request_id"],
}

get_request_tool = types.Tool(
    name="get_request",
    description="Fetch one request. Students can only fetch their own.",
    inputSchema=get_request_input_schema,
)


async def get_request(arguments: dict, state: CampusState) -> list[types.TextContent]:
    actor = require_actor(state, arguments, ("student", *STAFF_ROLES))
    request = state.store.get(required_arg(arguments, "request_id"))
    if actor.role == "student" and request.student_id != actor.id:
        raise PermissionDeniedError("students can only view their own requests")
    return text_result(request.model_dump(mode="json"))


# ── request_analytics ─────────────────────────────────────────────────────────

request_analytics_input_schema = {
    "type": "object",
    "properties": {
        "actor_id": ACTOR_ID_PROPERTY,
        "top_n": {"type": "integer", "minimum": 1, "description": "How many categories to rank (default 5)"},
    },
    "required": ["actor_id"],
}

request_analytics_tool = types.Tool(
    name="request_analytics",
    description=(
        "Summarise all requests: counts per status, the busiest service types and "
        "the resolution rate in percent. Staff and admins only."
    ),
    inputSchema=request_analytics_input_schema,
)


async def request_analytics(arguments: dict, state: CampusState) -> list[types.TextContent]:
    actor = require_actor(state, arguments, STAFF_ROLES)
    top_n = arguments.get("top_n")
    if top_n is None:
        top_n = TOP_CATEGORIES
    else:
        try:
            top_n = int(top_n)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"top_n must be an integer, got {top_n!r}") from exc
    summary = aggregate(state.store.list_for(actor.role, actor.id), top_n=top_n)
    return text_result(summary.model_dump())


# ── export_requests_csv ───────────────────────────────────────────────────────

export_requests_csv_input_schema = {
    "type": "object",
    "properties": {"actor_id": ACTOR_ID_PROPERTY},
    "required": ["actor_id"],
}

export_requests_csv_tool = types.Tool(
    name="export_requests_csv",
    description="Download every request as CSV text, newest first. Admins only.",
    inputSchema=export_requests_csv_input_schema,
)


async def export_requests_csv(arguments: dict, state: CampusState) -> list[types.TextContent]:
    actor = require_actor(state, arguments, ["admin"])
    report = render_csv_report(state.store.list_for(actor.role, actor.id))
    return [types.TextContent(type="text", text=report)]
