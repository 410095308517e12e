"""Domain models for audited admin operations."""

from dataclasses import dataclass, field

AMEND_ATTENDANCE = "amendAttendance"

APPLIED = "applied"
REJECTED = "rejected"
IGNORED = "ignored"
ERROR = "error"
TERMINAL_STATUSES = frozenset({APPLIED, REJECTED, IGNORED, ERROR})


@dataclass(frozen=True)
class AdminOperation:
    """A privileged correction request and, once reviewed, its outcome."""

    type: str | None
    requester_id: str | None
    requested_by: str | None
    session_id: str | None
    payload: dict[str, object] = field(default_factory=dict)
    status: str | None = None
    reason: str | None = None
    reviewed_at: int | None = None
    id: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class OperationOutcome:
    """Terminal decision recorded on an admin operation."""

    status: str
    reason: str | None
    reviewed_at: int
