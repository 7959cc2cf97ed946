"""
directory.py — In-memory user directory
=======================================
Holds every UserProfile (students, staff, admins) keyed by id.

  - register        : self-service sign-up, always creates a student
  - authenticate    : resolve a login attempt to the current stored profile
  - update_profile  : merge edited fields into an existing profile
  - get / list_users: plain reads for the tool layer

Profiles are never deleted and their id and role never change.
Every read hands back a copy, so callers cannot edit stored records.
"""

import logging
import threading
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError, validation_error_from
from .schema import ROLES, NewUserInput, ProfileUpdate, UserProfile, new_user_id
from .security import get_password_hash, unmet_password_rules, verify_password

logger = logging.getLogger(__name__)


def _hash_new_password(password: str) -> str:
    unmet = unmet_password_rules(password)
    if unmet:
        raise ValidationError(f"password does not meet requirements: {', '.join(unmet)}")
    return get_password_hash(password)


def _same_text(left: Optional[str], right: Optional[str]) -> bool:
    if left is None or right is None:
        return False
    return left.strip().casefold() == right.strip().casefold()


class UserDirectory:
    def __init__(self) -> None:
        self._users: dict[str, UserProfile] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    # ── Bootstrap ─────────────────────────────────────────────────────────────

    def load(self, profiles: Iterable[UserProfile]) -> None:
        """Insert pre-built profiles (seed fixtures) as they are."""
        profiles = list(profiles)
        with self._lock:
            seen = set(self._users)
            for profile in profiles:
                if profile.id in seen:
                    raise ValidationError(f"duplicate user id: {profile.id}")
                seen.add(profile.id)
            for profile in profiles:
                self._users[profile.id] = profile.model_copy()
        logger.info("Loaded %d user profile(s)", len(profiles))

    # ── Operations ────────────────────────────────────────────────────────────

    def register(self, data: Union[NewUserInput, dict[str, Any]]) -> UserProfile:
        if not isinstance(data, NewUserInput):
            try:
                data = NewUserInput.model_validate(data)
            except PydanticValidationError as exc:
                raise validation_error_from(exc) from exc

        password_hash = None
        if data.password is not None:
            if data.confirm_password is not None and data.confirm_password != data.password:
                raise ValidationError("passwords do not match")
            password_hash = _hash_new_password(data.password)

        with self._lock:
            self._ensure_unique(data.email, data.enrollment_number)
            user_id = new_user_id()
            while user_id in self._users:
                user_id = new_user_id()
            profile = UserProfile(
                id=user_id,
                name=data.name,
                email=data.email,
                role="student",
                enrollment_number=data.enrollment_number,
                department=data.department,
                avatar_url=data.avatar_url,
                password_hash=password_hash,
            )
            self._users[user_id] = profile

        logger.info("Registered student %s (%s)", profile.id, profile.email)
        return profile.model_copy()

    def authenticate(self, identifier: str, role: str, credentials: Optional[str] = None) -> UserProfile:
        """
        Students log in with their enrollment number, staff and admins with
        their email or id. A profile that was registered with a password
        also needs matching credentials.
        """
        if role not in ROLES:
            raise ValidationError(f"unknown role: {role}")
        key = (identifier or "").strip()
        if not key:
            raise ValidationError("identifier is required")

        with self._lock:
            match = next(
                (u for u in self._users.values() if u.role == role and self._identifies(u, key)),
                None,
            )
            match = match.model_copy() if match is not None else None

        if match is None:
            logger.warning("Login failed: no %s account for %r", role, key)
            raise NotFoundError(f"no {role} account matches {key!r}")
        if match.password_hash is not None:
            if credentials is None or not verify_password(credentials, match.password_hash):
                logger.warning("Login failed: bad credentials for %s", match.id)
                raise NotFoundError("invalid credentials")

        logger.info("Authenticated %s %s", role, match.id)
        return match

    def update_profile(self, user_id: str, **fields: Any) -> UserProfile:
        try:
            changes = ProfileUpdate(**fields).model_dump(exclude_unset=True)
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

        password = changes.pop("password", None)
        if password is not None:
            changes["password_hash"] = _hash_new_password(password)

        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                raise NotFoundError(f"no user with id {user_id!r}")
            # students log in with it
            if current.role == "student" and "enrollment_number" in changes and not changes["enrollment_number"]:
                raise ValidationError("enrollment_number cannot be cleared for a student")
            self._ensure_unique(changes.get("email"), changes.get("enrollment_number"), exclude_id=user_id)
            updated = current.model_copy(update=changes)
            self._users[user_id] = updated

        logger.info("Updated profile %s (%s)", user_id, ", ".join(sorted(changes)) or "no changes")
        return updated.model_copy()

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get(self, user_id: str) -> UserProfile:
        with self._lock:
            profile = self._users.get(user_id)
            if profile is None:
                raise NotFoundError(f"no user with id {user_id!r}")
            return profile.model_copy()

    def list_users(self, role: Optional[str] = None) -> list[UserProfile]:
        with self._lock:
            return [u.model_copy() for u in self._users.values() if role is None or u.role == role]

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _identifies(profile: UserProfile, key: str) -> bool:
        if profile.role == "student":
            return _same_text(profile.enrollment_number, key)
        return profile.id == key or _same_text(profile.email, key)

    def _ensure_unique(
        self,
        email: Optional[str],
        enrollment_number: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> None:
        # caller holds the lock
        for other in self._users.values():
            if other.id == exclude_id:
                continue
            if _same_text(other.email, email):
                raise ValidationError(f"email already registered: {email}")
            if _same_text(other.enrollment_number, enrollment_number):
                raise ValidationError(f"enrollment number already registered: {enrollment_number}")
