"""Supabase-backed session repository."""

from dataclasses import dataclass

from supabase import Client

from attendance_tracker.domain.sessions import SessionRecord
from attendance_tracker.services.sessions import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for session definitions."""

    client: Client

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("sessions")
            .select("id, subject_code, subject_name, hall_id, start_at, end_at, is_locked")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return SessionRecord(
            id=row["id"],
            subject_code=row["subject_code"],
            subject_name=row.get("subject_name") or row["subject_code"],
            hall_id=row["hall_id"],
            start_at=int(row["start_at"]),
            end_at=int(row["end_at"]),
            is_locked=bool(row.get("is_locked")),
        )

    def upsert_session(self, session: SessionRecord) -> None:
        """Insert the session or overwrite its scheduling fields."""
        self.client.table("sessions").upsert(
            {
                "id": session.id,
                "subject_code": session.subject_code,
                "subject_name": session.subject_name,
                "hall_id": session.hall_id,
                "start_at": session.start_at,
                "end_at": session.end_at,
                "is_locked": session.is_locked,
            },
            on_conflict="id",
        ).execute()

    def set_locked(self, session_id: str, locked: bool) -> None:
        """Update the lock flag of a session."""
        self.client.table("sessions").update({"is_locked": locked}).eq(
            "id", session_id
        ).execute()
