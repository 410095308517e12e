"""Supabase-backed admin operation repository."""

from dataclasses import dataclass

from supabase import Client

from attendance_tracker.domain.admin_ops import AdminOperation, OperationOutcome
from attendance_tracker.services.audit import AdminOperationRepository


@dataclass
class SupabaseAdminOperationRepository(AdminOperationRepository):
    """Supabase implementation for audited admin operations."""

    client: Client

    def push_operation(self, operation: AdminOperation) -> str:
        """Insert an operation row and return its generated id."""
        response = (
            self.client.table("admin_operations")
            .insert(
                {
                    "type": operation.type,
                    "requester_id": operation.requester_id,
                    "requested_by": operation.requested_by,
                    "session_id": operation.session_id,
                    "payload": operation.payload,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create admin operation")
        return str(response.data[0]["id"])

    def get_operation(self, operation_id: str) -> AdminOperation | None:
        """Return an operation by id, if present."""
        response = (
            self.client.table("admin_operations")
            .select("*")
            .eq("id", operation_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        payload = row.get("payload")
        return AdminOperation(
            id=str(row["id"]),
            type=row.get("type"),
            requester_id=row.get("requester_id"),
            requested_by=row.get("requested_by"),
            session_id=row.get("session_id"),
            payload=payload if isinstance(payload, dict) else {},
            status=row.get("status"),
            reason=row.get("reason"),
            reviewed_at=row.get("reviewed_at"),
        )

    def record_outcome(self, operation_id: str, outcome: OperationOutcome) -> None:
        """Write the terminal status of an operation."""
        self.client.table("admin_operations").update(
            {
                "status": outcome.status,
                "reason": outcome.reason,
                "reviewed_at": outcome.reviewed_at,
            }
        ).eq("id", operation_id).execute()
