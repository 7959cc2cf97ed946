"""Error kinds raised by the directory, the store and the tool layer."""

from pydantic import ValidationError as PydanticValidationError


class CampusServiceError(Exception):
    """Base class for every failure reported by this package."""


class ValidationError(CampusServiceError, ValueError):
    """A required field is missing or a value is outside its enumeration."""


class NotFoundError(CampusServiceError, LookupError):
    """An id or identifier does not match any stored record."""


class PermissionDeniedError(CampusServiceError, PermissionError):
    """The acting user's role may not invoke the requested tool."""


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    """Flatten a pydantic error into one readable line per failing field."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "input"
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{location}: {message}")
    return ValidationError("; ".join(problems))
