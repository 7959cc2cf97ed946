"""
tools/users.py — MCP tools for the user directory
=================================================
Four tools:
  - register_student    : self-service sign-up (always a student account)
  - authenticate_user   : resolve a login to the stored profile
  - get_user_profile    : look a profile up by id
  - update_user_profile : edit name, email and other profile details

Each tool has the usual three parts: an inputSchema dict, a types.Tool
descriptor and an async handler. Handlers take the CampusState as a
second argument; tools/__init__.py binds it.
"""

from mcp import types

from ..data import CampusState
from ..schema import ROLES
from .common import optional_arg, require_actor, required_arg, text_result

PROFILE_FIELDS = ["name", "email", "enrollment_number", "department", "avatar_url"]


# ── register_student ──────────────────────────────────────────────────────────

register_student_input_schema = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Full name"},
        "email": {"type": "string", "description": "College email address"},
        "enrollment_number": {"type": "string", "description": "Enrollment number, used to log in"},
        "department": {"type": "string", "description": "Department (defaults to Computer Science)"},
        "avatar_url": {"type": "string", "description": "Profile photo URL"},
        "password": {
            "type": "string",
            "description": "Optional. At least 6 characters with a lowercase, an uppercase and a symbol",
        },
        "confirm_password": {"type": "string", "description": "Must repeat password when given"},
    },
    "required": ["name", "email", "enrollment_number"],
}

register_student_tool = types.Tool(
    name="register_student",
    description=(
        "Create a new student account. Returns the full profile including the "
        "generated user id, which is the actor_id for every request tool."
    ),
    inputSchema=register_student_input_schema,
)


async def register_student(arguments: dict, state: CampusState) -> list[types.TextContent]:
    data = {key: arguments[key] for key in register_student_input_schema["properties"] if key in arguments}
    profile = state.directory.register(data)
    return text_result(profile.model_dump())


# ── authenticate_user ─────────────────────────────────────────────────────────

authenticate_user_input_schema = {
    "type": "object",
    "properties": {
        "identifier": {
            "type": "string",
            "description": "Enrollment number for students, email or user id for staff and admins",
        },
        "role": {"type": "string", "enum": list(ROLES), "description": "Role to log in as"},
        "password": {"type": "string", "description": "Needed only for accounts registered with a password"},
    },
    "required": ["identifier", "role"],
}

authenticate_user_tool = types.Tool(
    name="authenticate_user",
    description="Log in as a student, staff member or admin and return the current profile.",
    inputSchema=authenticate_user_input_schema,
)


async def authenticate_user(arguments: dict, state: CampusState) -> list[types.TextContent]:
    profile = state.directory.authenticate(
        required_arg(arguments, "identifier"),
        required_arg(arguments, "role"),
        arguments.get("password"),
    )
    return text_result(profile.model_dump())


# ── get_user_profile ──────────────────────────────────────────────────────────

get_user_profile_input_schema = {
    "type": "object",
    "properties": {
        "user_id": {"type": "string", "description": "The user id to look up (e.g. s1)"},
    },
    "required": ["user_id"],
}

get_user_profile_tool = types.Tool(
    name="get_user_profile",
    description="Retrieve a user's profile (name, email, role, department) by user id.",
    inputSchema=get_user_profile_input_schema,
)


async def get_user_profile(arguments: dict, state: CampusState) -> list[types.TextContent]:
    profile = state.directory.get(required_arg(arguments, "user_id"))
    return text_result(profile.model_dump())


# ── update_user_profile ───────────────────────────────────────────────────────
# Users edit their own profile; admins may edit anyone's.

update_user_profile_input_schema = {
    "type": "object",
    "properties": {
        "actor_id": {"type": "string", "description": "Id of the logged-in user making the change"},
        "user_id": {"type": "string", "description": "Profile to edit; defaults to the actor"},
        "name": {"type": "string"},
        "email": {"type": "string"},
        "enrollment_number": {"type": "string"},
        "department": {"type": "string"},
        "avatar_url": {"type": "string"},
        "password": {"type": "string", "description": "New password, same rules as registration"},
    },
    "required": ["actor_id"],
}

update_user_profile_tool = types.Tool(
    name="update_user_profile",
    description=(
        "Edit profile details. Only the supplied fields change. Existing requests "
        "keep the student name they were filed under."
    ),
    inputSchema=update_user_profile_input_schema,
)


async def update_user_profile(arguments: dict, state: CampusState) -> list[types.TextContent]:
    actor = require_actor(state, arguments, ROLES)
    target_id = optional_arg(arguments, "user_id") or actor.id
    if target_id != actor.id:
        require_actor(state, arguments, ["admin"])

    changes = {key: arguments[key] for key in PROFILE_FIELDS + ["password"] if key in arguments}
    profile = state.directory.update_profile(target_id, **changes)
    return text_result(profile.model_dump())
