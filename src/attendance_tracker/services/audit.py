"""Audit pipeline for privileged correction requests."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from attendance_tracker.clock import now_ms
from attendance_tracker.domain.admin_ops import (
    AMEND_ATTENDANCE,
    APPLIED,
    ERROR,
    IGNORED,
    REJECTED,
    AdminOperation,
    OperationOutcome,
)
from attendance_tracker.domain.attendance import (
    ADMIN_EDIT_SOURCE,
    ATTENDANCE_STATUSES,
    AttendanceEvent,
)
from attendance_tracker.services.admission import AdmissionService
from attendance_tracker.services.identity import IdentityProvider

_logger = logging.getLogger(__name__)


class AdminOperationRepository(Protocol):
    """Persistence interface for admin operations."""

    def push_operation(self, operation: AdminOperation) -> str:
        """Store a new operation under a generated key and return the key."""

    def get_operation(self, operation_id: str) -> AdminOperation | None:
        """Return an operation by id, if present."""

    def record_outcome(self, operation_id: str, outcome: OperationOutcome) -> None:
        """Write the terminal status, reason and review time."""


@dataclass
class AuditService:
    """Reviews admin operations and applies the accepted ones."""

    operation_repository: AdminOperationRepository
    identity_provider: IdentityProvider
    admission_service: AdmissionService
    clock: Callable[[], int] = field(default=now_ms)

    def submit_operation(self, operation: AdminOperation) -> str:
        """Persist a new operation awaiting review."""
        return self.operation_repository.push_operation(operation)

    def get_operation(self, operation_id: str) -> AdminOperation | None:
        """Return an operation with its current status."""
        return self.operation_repository.get_operation(operation_id)

    def process_operation(self, operation_id: str) -> OperationOutcome | None:
        """Review one operation and record its terminal outcome.

        Operations already carrying a terminal status are returned as-is, so
        a redelivered trigger never applies a correction twice. Returns None
        if the operation does not exist.
        """
        operation = self.operation_repository.get_operation(operation_id)
        if operation is None:
            _logger.warning("Admin operation not found: operation_id=%s", operation_id)
            return None
        if operation.is_terminal:
            return OperationOutcome(
                status=str(operation.status),
                reason=operation.reason,
                reviewed_at=operation.reviewed_at or 0,
            )

        server_now = self.clock()
        try:
            status, reason = self._review(operation)
        except Exception as exc:
            _logger.exception("Admin operation failed: operation_id=%s", operation_id)
            status, reason = ERROR, str(exc) or exc.__class__.__name__

        outcome = OperationOutcome(status=status, reason=reason, reviewed_at=server_now)
        self.operation_repository.record_outcome(operation_id, outcome)
        _logger.info(
            "Admin operation reviewed: operation_id=%s type=%s status=%s reason=%s",
            operation_id,
            operation.type,
            status,
            reason,
        )
        return outcome

    def _review(self, operation: AdminOperation) -> tuple[str, str | None]:
        requester = (
            self.identity_provider.lookup_user(operation.requester_id)
            if operation.requester_id
            else None
        )
        if requester is None or not requester.is_admin:
            return REJECTED, "not admin"

        if operation.type != AMEND_ATTENDANCE:
            return IGNORED, "unknown type"

        payload = operation.payload or {}
        if not operation.session_id or payload.get("status") not in ATTENDANCE_STATUSES:
            return REJECTED, "invalid payload"

        correction = AttendanceEvent(
            session_id=operation.session_id,
            status=str(payload["status"]),
            hall_id=_optional_str(payload.get("hallId")),
            student_id=_optional_str(payload.get("studentId")),
            client_timestamp=_optional_int(payload.get("clientTimestamp")),
            source=ADMIN_EDIT_SOURCE,
            edited_by=operation.requested_by or requester.email or "unknown",
        )
        result = self.admission_service.submit_event(correction)
        if result.admitted:
            return APPLIED, f"correction {result.event_id} admitted"
        return APPLIED, f"correction {result.event_id} discarded: {result.reason}"


def _optional_str(value: object) -> str | None:
    return str(value) if value not in (None, "") else None


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return int(value)
