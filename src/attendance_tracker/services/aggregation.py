"""Atomic folding of admitted events into session summaries."""

import logging
from dataclasses import dataclass

from attendance_tracker.domain.attendance import AttendanceEvent
from attendance_tracker.domain.summary import SessionSummary
from attendance_tracker.services.sessions import SummaryRepository

_logger = logging.getLogger(__name__)


@dataclass
class AggregationService:
    """Maintains the live counters for each session."""

    summary_repository: SummaryRepository

    def fold(self, event: AttendanceEvent, server_now: int) -> SessionSummary:
        """Count one admitted event in its session summary."""
        session_id = str(event.session_id)
        status = str(event.status)

        def apply(current: SessionSummary | None) -> SessionSummary:
            base = current or SessionSummary.empty(session_id)
            return base.fold(status, server_now)

        summary = self.summary_repository.transact(session_id, apply)
        if summary is None:
            raise RuntimeError(f"Summary update returned nothing for {session_id}")
        _logger.info(
            "Summary updated: session_id=%s status=%s count=%s",
            session_id,
            status,
            summary.counts.get(status),
        )
        return summary
