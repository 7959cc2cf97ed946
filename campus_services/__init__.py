"""In-memory campus service request tracker, served as MCP tools."""

from .analytics import aggregate, render_csv_report
from .data import CampusState, bootstrap
from .directory import UserDirectory
from .errors import CampusServiceError, NotFoundError, PermissionDeniedError, ValidationError
from .store import RequestStore

__all__ = [
    "CampusServiceError",
    "CampusState",
    "NotFoundError",
    "PermissionDeniedError",
    "RequestStore",
    "UserDirectory",
    "ValidationError",
    "aggregate",
    "bootstrap",
    "render_csv_report",
]
