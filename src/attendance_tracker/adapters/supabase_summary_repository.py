"""Supabase-backed summary repository with optimistic concurrency."""

import logging
from dataclasses import dataclass

from supabase import Client

from attendance_tracker.domain.errors import TransactionConflictError
from attendance_tracker.domain.summary import SessionSummary
from attendance_tracker.services.sessions import SummaryRepository, SummaryUpdate

_logger = logging.getLogger(__name__)

_COLUMNS = "session_id, counts, unique_present, completed, updated_at, version"


@dataclass
class SupabaseSummaryRepository(SummaryRepository):
    """Summary rows guarded by a ``version`` column.

    Each write is conditional on the version that was read, so concurrent
    folds on one session retry instead of overwriting each other. Rows of
    different sessions never contend.
    """

    client: Client
    max_retries: int = 25

    def get_summary(self, session_id: str) -> SessionSummary | None:
        """Return the summary for a session, if present."""
        row = self._fetch(session_id)
        return _summary_from_row(row) if row else None

    def transact(self, session_id: str, update: SummaryUpdate) -> SessionSummary | None:
        """Apply ``update`` with compare-and-retry on the row version."""
        for attempt in range(1, self.max_retries + 1):
            row = self._fetch(session_id)
            current = _summary_from_row(row) if row else None
            updated = update(current)
            if updated is None:
                return current

            payload = _row_from_summary(updated)
            if row is None:
                payload["version"] = 1
                response = (
                    self.client.table("session_summaries")
                    .upsert(payload, on_conflict="session_id", ignore_duplicates=True)
                    .execute()
                )
            else:
                payload["version"] = int(row["version"]) + 1
                response = (
                    self.client.table("session_summaries")
                    .update(payload)
                    .eq("session_id", session_id)
                    .eq("version", row["version"])
                    .execute()
                )
            if response.data:
                return updated
            _logger.info(
                "Summary write conflict: session_id=%s attempt=%s", session_id, attempt
            )
        raise TransactionConflictError(
            f"Summary update for {session_id} failed after {self.max_retries} attempts"
        )

    def _fetch(self, session_id: str) -> dict[str, object] | None:
        response = (
            self.client.table("session_summaries")
            .select(_COLUMNS)
            .eq("session_id", session_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None


def _summary_from_row(row: dict[str, object]) -> SessionSummary:
    counts = row.get("counts") or {}
    updated_at = row.get("updated_at")
    return SessionSummary(
        session_id=str(row["session_id"]),
        counts={str(key): int(value) for key, value in dict(counts).items()},
        unique_present=int(row.get("unique_present") or 0),
        completed=int(row.get("completed") or 0),
        updated_at=int(updated_at) if updated_at is not None else None,
    )


def _row_from_summary(summary: SessionSummary) -> dict[str, object]:
    return {
        "session_id": summary.session_id,
        "counts": dict(summary.counts),
        "unique_present": summary.unique_present,
        "completed": summary.completed,
        "updated_at": summary.updated_at,
    }
