"""Supabase-backed attendance event repository."""

from dataclasses import dataclass

from supabase import Client

from attendance_tracker.domain.attendance import AttendanceEvent
from attendance_tracker.services.admission import AttendanceRepository


@dataclass
class SupabaseAttendanceRepository(AttendanceRepository):
    """Supabase implementation for attendance events."""

    client: Client

    def push_event(self, event: AttendanceEvent) -> str:
        """Insert an event row and return its generated id."""
        response = (
            self.client.table("attendance_events")
            .insert(
                {
                    "session_id": event.session_id,
                    "status": event.status,
                    "hall_id": event.hall_id,
                    "student_id": event.student_id,
                    "client_timestamp": event.client_timestamp,
                    "server_timestamp": event.server_timestamp,
                    "source": event.source,
                    "edited_by": event.edited_by,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create attendance event")
        return str(response.data[0]["id"])

    def get_event(self, event_id: str) -> AttendanceEvent | None:
        """Return an event by id, if present."""
        response = (
            self.client.table("attendance_events")
            .select("*")
            .eq("id", event_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return AttendanceEvent(
            id=str(row["id"]),
            session_id=row.get("session_id"),
            status=row.get("status"),
            hall_id=row.get("hall_id"),
            student_id=row.get("student_id"),
            client_timestamp=row.get("client_timestamp"),
            server_timestamp=row.get("server_timestamp"),
            source=row.get("source"),
            edited_by=row.get("edited_by"),
        )

    def delete_event(self, event_id: str) -> None:
        """Delete an event row."""
        self.client.table("attendance_events").delete().eq("id", event_id).execute()

    def set_server_timestamp(self, event_id: str, server_timestamp: int) -> None:
        """Stamp an event with server time."""
        self.client.table("attendance_events").update(
            {"server_timestamp": server_timestamp}
        ).eq("id", event_id).execute()
