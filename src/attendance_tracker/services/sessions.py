"""Session administration: scheduling, locking and summary bootstrap."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from attendance_tracker.clock import now_ms
from attendance_tracker.domain.errors import (
    InvalidArgumentError,
    PermissionDeniedError,
)
from attendance_tracker.domain.identity import Identity
from attendance_tracker.domain.sessions import SessionRecord
from attendance_tracker.domain.summary import SessionSummary

_logger = logging.getLogger(__name__)

SummaryUpdate = Callable[[SessionSummary | None], SessionSummary | None]


class SessionRepository(Protocol):
    """Persistence interface for session definitions."""

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""

    def upsert_session(self, session: SessionRecord) -> None:
        """Create the session or overwrite its fields."""

    def set_locked(self, session_id: str, locked: bool) -> None:
        """Set the lock flag of a session."""


class SummaryRepository(Protocol):
    """Persistence interface for per-session summaries."""

    def get_summary(self, session_id: str) -> SessionSummary | None:
        """Return the summary for a session, if present."""

    def transact(self, session_id: str, update: SummaryUpdate) -> SessionSummary | None:
        """Atomically replace the summary with ``update(current)``.

        ``update`` must be pure: it may run several times when concurrent
        writers conflict. Returning None leaves the record untouched.
        Returns the committed summary.
        """


@dataclass
class SessionAdminService:
    """Privileged session management."""

    session_repository: SessionRepository
    summary_repository: SummaryRepository
    clock: Callable[[], int] = field(default=now_ms)

    def create_or_update_session(  # noqa: PLR0913
        self,
        caller: Identity | None,
        *,
        subject_code: str | None,
        hall_id: str | None,
        start_at: int | None,
        end_at: int | None,
        session_id: str | None = None,
        subject_name: str | None = None,
    ) -> str:
        """Upsert a session and make sure its summary exists."""
        _require_admin(caller)
        if not subject_code or not hall_id or not start_at or not end_at:
            raise InvalidArgumentError("Missing subjectCode/hallId/startAt/endAt")
        if end_at <= start_at:
            raise InvalidArgumentError("endAt must be > startAt")

        resolved_id = session_id or str(uuid4())
        self.session_repository.upsert_session(
            SessionRecord(
                id=resolved_id,
                subject_code=subject_code,
                subject_name=subject_name or subject_code,
                hall_id=hall_id,
                start_at=start_at,
                end_at=end_at,
                is_locked=False,
            )
        )
        bootstrapped_at = self.clock()
        self.summary_repository.transact(
            resolved_id,
            lambda current: None
            if current is not None
            else SessionSummary.empty(resolved_id, bootstrapped_at),
        )
        _logger.info(
            "Session saved: session_id=%s hall_id=%s window=%s-%s",
            resolved_id,
            hall_id,
            start_at,
            end_at,
        )
        return resolved_id

    def lock_session(
        self, caller: Identity | None, session_id: str | None, locked: object
    ) -> None:
        """Set the lock flag on a session."""
        _require_admin(caller)
        if not session_id:
            raise InvalidArgumentError("sessionId required")
        self.session_repository.set_locked(session_id, bool(locked))
        _logger.info("Session lock set: session_id=%s locked=%s", session_id, bool(locked))

    def get_summary(self, session_id: str) -> SessionSummary | None:
        """Return the live summary for a session."""
        return self.summary_repository.get_summary(session_id)


def _require_admin(caller: Identity | None) -> None:
    if caller is None or not caller.is_admin:
        raise PermissionDeniedError("Admin only")
