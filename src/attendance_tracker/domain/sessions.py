"""Domain models for attendance sessions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionRecord:
    """A scheduled attendance window for a subject in a hall."""

    id: str
    subject_code: str
    subject_name: str
    hall_id: str
    start_at: int
    end_at: int
    is_locked: bool = False
