from functools import partial

from ..data import CampusState
from .requests import (
    submit_request_tool, submit_request,
    update_request_status_tool, update_request_status,
    list_requests_tool, list_requests,
    get_request_tool, get_request,
    request_analytics_tool, request_analytics,
    export_requests_csv_tool, export_requests_csv,
)
from .users import (
    register_student_tool, register_student,
    authenticate_user_tool, authenticate_user,
    get_user_profile_tool, get_user_profile,
    update_user_profile_tool, update_user_profile,
)

# (descriptor, handler) pairs. To add a tool: write its descriptor + handler
# in requests.py or users.py, then add one line here. server.py needs no change.
TOOL_DEFINITIONS = [
    (register_student_tool,       register_student),
    (authenticate_user_tool,      authenticate_user),
    (get_user_profile_tool,       get_user_profile),
    (update_user_profile_tool,    update_user_profile),
    (submit_request_tool,         submit_request),
    (update_request_status_tool,  update_request_status),
    (list_requests_tool,          list_requests),
    (get_request_tool,            get_request),
    (request_analytics_tool,      request_analytics),
    (export_requests_csv_tool,    export_requests_csv),
]


def build_tools(state: CampusState) -> dict:
    """Registry mapping tool name -> {"tool": types.Tool, "handler": callable}, bound to one state."""
    return {
        tool.name: {"tool": tool, "handler": partial(handler, state=state)}
        for tool, handler in TOOL_DEFINITIONS
    }
