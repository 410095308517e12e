"""Admission of attendance events against session windows."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Protocol

from attendance_tracker.clock import now_ms
from attendance_tracker.domain.attendance import (
    ADMITTED,
    DISCARDED,
    AdmissionResult,
    AttendanceEvent,
)
from attendance_tracker.services.aggregation import AggregationService
from attendance_tracker.services.sessions import SessionRepository

_logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD_MS = 15 * 60 * 1000


class AttendanceRepository(Protocol):
    """Persistence interface for attendance events."""

    def push_event(self, event: AttendanceEvent) -> str:
        """Store a new event under a generated key and return the key."""

    def get_event(self, event_id: str) -> AttendanceEvent | None:
        """Return an event by id, if present."""

    def delete_event(self, event_id: str) -> None:
        """Remove an event."""

    def set_server_timestamp(self, event_id: str, server_timestamp: int) -> None:
        """Stamp an event with authoritative server time."""


@dataclass
class AdmissionService:
    """Accepts or discards incoming attendance events."""

    attendance_repository: AttendanceRepository
    session_repository: SessionRepository
    aggregation_service: AggregationService
    grace_period_ms: int = DEFAULT_GRACE_PERIOD_MS
    clock: Callable[[], int] = field(default=now_ms)

    def record_event(self, event: AttendanceEvent) -> str:
        """Persist an untrusted event so it can be admitted later.

        Any server timestamp on the incoming event is dropped: only admission
        sets it.
        """
        return self.attendance_repository.push_event(
            replace(event, server_timestamp=None)
        )

    def submit_event(self, event: AttendanceEvent) -> AdmissionResult:
        """Record an event and run it through admission."""
        return self.admit_event(self.record_event(event))

    def admit_event(self, event_id: str) -> AdmissionResult:
        """Validate a recorded event and fold it into its session summary."""
        event = self.attendance_repository.get_event(event_id)
        if event is None:
            return self._discarded(event_id, "event not found", delete=False)
        if event.server_timestamp is not None:
            _logger.info("Event already admitted: event_id=%s", event_id)
            return AdmissionResult(
                event_id=event_id,
                outcome=ADMITTED,
                reason="already admitted",
                server_timestamp=event.server_timestamp,
            )
        if not event.is_complete():
            return self._discarded(event_id, "missing or invalid fields")

        session = self.session_repository.get_session(str(event.session_id))
        if session is None:
            return self._discarded(event_id, "unknown session")

        server_now = self.clock()
        if session.is_locked:
            return self._discarded(event_id, "session locked")
        if server_now < session.start_at:
            return self._discarded(event_id, "before session start")
        if server_now > session.end_at + self.grace_period_ms:
            return self._discarded(event_id, "after grace period")

        self.attendance_repository.set_server_timestamp(event_id, server_now)
        self.aggregation_service.fold(event, server_now)
        _logger.info(
            "Event admitted: event_id=%s session_id=%s status=%s",
            event_id,
            event.session_id,
            event.status,
        )
        return AdmissionResult(
            event_id=event_id, outcome=ADMITTED, server_timestamp=server_now
        )

    def _discarded(
        self, event_id: str, reason: str, delete: bool = True
    ) -> AdmissionResult:
        if delete:
            self.attendance_repository.delete_event(event_id)
        _logger.info("Event discarded: event_id=%s reason=%s", event_id, reason)
        return AdmissionResult(event_id=event_id, outcome=DISCARDED, reason=reason)
