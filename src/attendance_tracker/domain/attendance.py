"""Domain models for attendance events."""

from dataclasses import dataclass

ENTRY = "ENTRY"
TOILET_OUT = "TOILET_OUT"
TOILET_IN = "TOILET_IN"
EXIT = "EXIT"
ATTENDANCE_STATUSES = (ENTRY, TOILET_OUT, TOILET_IN, EXIT)

ADMIN_EDIT_SOURCE = "ADMIN_EDIT"

ADMITTED = "admitted"
DISCARDED = "discarded"


@dataclass(frozen=True)
class AttendanceEvent:
    """An attendance event as submitted by a client or the audit pipeline.

    Every field except ``server_timestamp`` comes from an untrusted caller, so
    all of them may be missing. ``server_timestamp`` is only authoritative once
    the event has been admitted.
    """

    session_id: str | None
    status: str | None
    hall_id: str | None
    student_id: str | None
    client_timestamp: int | None = None
    server_timestamp: int | None = None
    source: str | None = None
    edited_by: str | None = None
    id: str | None = None

    def is_complete(self) -> bool:
        """Return True when every field needed for admission is present."""
        return bool(
            self.session_id
            and self.status
            and self.hall_id
            and self.student_id
            and self.status in ATTENDANCE_STATUSES
        )


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of running one event through admission."""

    event_id: str
    outcome: str
    reason: str | None = None
    server_timestamp: int | None = None

    @property
    def admitted(self) -> bool:
        return self.outcome == ADMITTED
