"""Pydantic models for API payloads."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _scalar_text(value: object) -> str | None:
    """Coerce scalar input to text; anything else counts as missing."""
    if isinstance(value, bool) or value in (None, ""):
        return None
    if isinstance(value, str | int | float):
        return str(value)
    return None


def _scalar_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def _mapping(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


LooseText = Annotated[str | None, BeforeValidator(_scalar_text)]
LooseInt = Annotated[int | None, BeforeValidator(_scalar_int)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SessionUpsertRequest(_CamelModel):
    """Create or update a session."""

    session_id: str | None = Field(default=None, alias="sessionId")
    subject_code: str | None = Field(default=None, alias="subjectCode")
    subject_name: str | None = Field(default=None, alias="subjectName")
    hall_id: str | None = Field(default=None, alias="hallId")
    start_at: int | None = Field(default=None, alias="startAt")
    end_at: int | None = Field(default=None, alias="endAt")


class LockRequest(_CamelModel):
    """Toggle a session lock."""

    locked: bool = False


class AttendanceEventRequest(_CamelModel):
    """Attendance event as sent by a client device.

    Malformed or missing fields never fail validation here; they arrive as
    None and admission discards the event.
    """

    session_id: LooseText = Field(default=None, alias="sessionId")
    status: LooseText = None
    hall_id: LooseText = Field(default=None, alias="hallId")
    student_id: LooseText = Field(default=None, alias="studentId")
    client_timestamp: LooseInt = Field(default=None, alias="clientTimestamp")


class AdminOperationRequest(_CamelModel):
    """Privileged correction request; the audit pipeline judges its contents."""

    type: LooseText = None
    session_id: LooseText = Field(default=None, alias="sessionId")
    requested_by: LooseText = Field(default=None, alias="requestedBy")
    payload: Annotated[dict[str, object], BeforeValidator(_mapping)] = Field(
        default_factory=dict
    )
