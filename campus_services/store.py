"""
store.py — In-memory request store
==================================
The single source of truth for ServiceRequest records.

  - submit        : a student files a new request (status "Submitted")
  - update_status : staff move a request to any status, optionally with remarks
  - transition    : update_status that also returns the replaced status
  - get           : fetch one request by id
  - list_for      : role-scoped, filtered, newest-first read

Records are kept most-recent-first: new submissions go to the head of the
list, so requests sharing a date come back in reverse insertion order.
The store does no authorisation; the tool layer decides who may call what.
"""

import logging
import threading
from datetime import date
from typing import Callable, Iterable, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError, validation_error_from
from .schema import (
    REQUEST_STATUSES,
    ROLES,
    SERVICE_TYPES,
    RequestFilters,
    ServiceRequest,
    new_request_id,
)

logger = logging.getLogger(__name__)


class RequestStore:
    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        self._requests: list[ServiceRequest] = []
        self._index: dict[str, ServiceRequest] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._requests)

    # ── Bootstrap ─────────────────────────────────────────────────────────────

    def load(self, requests: Iterable[ServiceRequest]) -> None:
        """Seed records, given most-recent-first. They go after anything already stored."""
        requests = list(requests)
        with self._lock:
            seen = set(self._index)
            for request in requests:
                if request.id in seen:
                    raise ValidationError(f"duplicate request id: {request.id}")
                seen.add(request.id)
            for request in requests:
                record = request.model_copy()
                self._requests.append(record)
                self._index[record.id] = record
        logger.info("Loaded %d service request(s)", len(requests))

    # ── Writes ────────────────────────────────────────────────────────────────

    def submit(
        self,
        student_id: str,
        student_name: str,
        service_type: str,
        description: str,
        location: Optional[str] = None,
    ) -> ServiceRequest:
        if service_type not in SERVICE_TYPES:
            logger.warning("Rejected submission from %s: unknown service type %r", student_id, service_type)
            raise ValidationError(f"unknown service type: {service_type!r}")
        try:
            record = ServiceRequest(
                id="pending",
                student_id=student_id,
                student_name=student_name,
                service_type=service_type,
                location=location,
                description=description,
                status="Submitted",
                date=self._clock(),
            )
        except PydanticValidationError as exc:
            error = validation_error_from(exc)
            logger.warning("Rejected submission from %s: %s", student_id, error)
            raise error from exc

        with self._lock:
            request_id = new_request_id()
            while request_id in self._index:
                request_id = new_request_id()
            record.id = request_id
            self._requests.insert(0, record)
            self._index[request_id] = record
            result = record.model_copy()

        logger.info("Request %s submitted by %s (%s)", result.id, result.student_id, result.service_type)
        return result

    def update_status(self, request_id: str, status: str, remarks: Optional[str] = None) -> ServiceRequest:
        """
        Any status may follow any other; reopening a resolved request is
        allowed. remarks=None keeps whatever remarks the request already has.
        """
        return self.transition(request_id, status, remarks)[1]

    def transition(
        self, request_id: str, status: str, remarks: Optional[str] = None
    ) -> tuple[str, ServiceRequest]:
        """Same as update_status, but also returns the status it replaced."""
        if status not in REQUEST_STATUSES:
            raise ValidationError(f"unknown status: {status!r}")

        with self._lock:
            record = self._index.get(request_id)
            if record is None:
                logger.warning("Status update for unknown request %r", request_id)
                raise NotFoundError(f"no request with id {request_id!r}")
            previous = record.status
            record.status = status
            if remarks is not None:
                record.remarks = remarks
            result = record.model_copy()

        logger.info("Request %s: %s -> %s", request_id, previous, status)
        return previous, result

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get(self, request_id: str) -> ServiceRequest:
        with self._lock:
            record = self._index.get(request_id)
            if record is None:
                raise NotFoundError(f"no request with id {request_id!r}")
            return record.model_copy()

    def list_for(
        self,
        role: str,
        user_id: Optional[str] = None,
        filters: Union[RequestFilters, dict, None] = None,
    ) -> list[ServiceRequest]:
        if role not in ROLES:
            raise ValidationError(f"unknown role: {role}")
        if role == "student" and not user_id:
            raise ValidationError("user_id is required to list a student's requests")
        if not isinstance(filters, RequestFilters):
            try:
                filters = RequestFilters.model_validate(filters or {})
            except PydanticValidationError as exc:
                raise validation_error_from(exc) from exc

        with self._lock:
            snapshot = [r.model_copy() for r in self._requests]

        if role == "student":
            snapshot = [r for r in snapshot if r.student_id == user_id]
        if filters.status and filters.status != "All":
            snapshot = [r for r in snapshot if r.status == filters.status]
        if filters.search:
            needle = filters.search.casefold()
            snapshot = [
                r for r in snapshot
                if needle in r.student_name.casefold()
                or needle in r.service_type.casefold()
                or needle in r.id.casefold()
            ]

        # sorted() is stable, so same-date records keep head-first insertion order
        return sorted(snapshot, key=lambda r: r.date, reverse=True)

    def all(self) -> list[ServiceRequest]:
        with self._lock:
            return [r.model_copy() for r in self._requests]
