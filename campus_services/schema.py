"""
schema.py — Pydantic models for the campus services tracker
===========================================================
These are the domain objects that flow through the system: user profiles,
service requests, list filters and the analytics summary.
Pydantic gives us validation and easy dict/JSON conversion.
"""

import uuid
from datetime import date as Date
from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


# ── Enumerations ──────────────────────────────────────────────────────────────

Role = Literal["student", "staff", "admin"]

RequestStatus = Literal["Submitted", "In Progress", "Resolved"]

ServiceType = Literal[
    "Drinking Water Issue",
    "ID Card Issue",
    "ERP Related Issue",
    "Water Related Issue",
    "Cleanliness in Classroom",
    "Parking Related Issue",
    "Canteen Issue",
    "Ragging / Harassment",
    "Other",
]

ROLES: tuple[str, ...] = get_args(Role)
REQUEST_STATUSES: tuple[str, ...] = get_args(RequestStatus)
SERVICE_TYPES: tuple[str, ...] = get_args(ServiceType)

STAFF_ROLES = ("staff", "admin")

DEFAULT_DEPARTMENT = "Computer Science"
DEFAULT_AVATAR_URL = (
    "https://images.unsplash.com/photo-1535713875002-d1d0cf377fde"
    "?auto=format&fit=crop&q=80&w=100"
)


def new_user_id() -> str:
    return f"STU-{uuid.uuid4().hex[:8].upper()}"


def new_request_id() -> str:
    return f"REQ-{uuid.uuid4().hex[:8].upper()}"


def _required_text(value: str, info: ValidationInfo) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{info.field_name} is required")
    return value


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ── Users ─────────────────────────────────────────────────────────────────────

class UserProfile(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    enrollment_number: Optional[str] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = None
    # Never serialised; only the directory reads it
    password_hash: Optional[str] = Field(default=None, exclude=True, repr=False)


class NewUserInput(BaseModel):
    """Self-service sign-up form. Registration always yields a student."""

    name: str
    email: str
    enrollment_number: str
    department: Optional[str] = DEFAULT_DEPARTMENT
    avatar_url: Optional[str] = DEFAULT_AVATAR_URL
    password: Optional[str] = Field(default=None, repr=False)
    confirm_password: Optional[str] = Field(default=None, repr=False)

    @field_validator("name", "email", "enrollment_number")
    @classmethod
    def strip_required(cls, value: str, info: ValidationInfo) -> str:
        return _required_text(value, info)

    @field_validator("department", "avatar_url")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value)


class ProfileUpdate(BaseModel):
    """Editable subset of a profile. id and role cannot be edited."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None
    enrollment_number: Optional[str] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)

    @field_validator("name", "email")
    @classmethod
    def reject_blank(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return _required_text(value, info)

    @field_validator("enrollment_number", "department", "avatar_url")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value)


# ── Service requests ──────────────────────────────────────────────────────────

class ServiceRequest(BaseModel):
    id: str = Field(default_factory=new_request_id)
    student_id: str
    student_name: str
    service_type: ServiceType
    location: Optional[str] = None
    description: str
    status: RequestStatus = "Submitted"
    date: Date = Field(default_factory=Date.today)
    remarks: Optional[str] = None

    @field_validator("student_id", "student_name", "description")
    @classmethod
    def strip_required(cls, value: str, info: ValidationInfo) -> str:
        return _required_text(value, info)

    @field_validator("location", "remarks")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value)


class RequestFilters(BaseModel):
    """Optional narrowing for list reads. "All" is the same as no status filter."""

    status: Optional[Literal["All", "Submitted", "In Progress", "Resolved"]] = None
    search: Optional[str] = None

    @field_validator("search")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value)


# ── Analytics ─────────────────────────────────────────────────────────────────

class CategoryCount(BaseModel):
    service_type: str
    count: int
    percentage: float


class AnalyticsSummary(BaseModel):
    total: int
    status_counts: dict[str, int]
    pending: int
    in_progress: int
    resolved: int
    resolution_rate: float
    top_categories: list[CategoryCount] = Field(default_factory=list)
