"""Domain models for live session summaries."""

from dataclasses import dataclass, field, replace

from attendance_tracker.domain.attendance import ATTENDANCE_STATUSES, ENTRY, EXIT


def _zero_counts() -> dict[str, int]:
    return {status: 0 for status in ATTENDANCE_STATUSES}


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate counters for one session."""

    session_id: str
    counts: dict[str, int] = field(default_factory=_zero_counts)
    unique_present: int = 0
    completed: int = 0
    updated_at: int | None = None

    @classmethod
    def empty(cls, session_id: str, updated_at: int | None = None) -> "SessionSummary":
        """Return an all-zero summary."""
        return cls(session_id=session_id, updated_at=updated_at)

    def fold(self, status: str, server_now: int) -> "SessionSummary":
        """Return a new summary with one event of ``status`` counted."""
        counts = _zero_counts()
        counts.update(self.counts)
        counts[status] = counts.get(status, 0) + 1
        return replace(
            self,
            counts=counts,
            unique_present=self.unique_present + (1 if status == ENTRY else 0),
            completed=self.completed + (1 if status == EXIT else 0),
            updated_at=server_now,
        )
