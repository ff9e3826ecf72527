"""Supabase-backed estimate repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from planning_poker.domain.sessions import EstimateRecord
from planning_poker.services.sessions import EstimateRepository


@dataclass
class SupabaseEstimateRepository(EstimateRepository):
    """Supabase implementation for participant estimates."""

    client: Client

    def upsert_estimate(
        self, session_id: UUID, nickname: str, value: float
    ) -> EstimateRecord:
        """Insert or update the row for (session_id, nickname)."""
        response = (
            self.client.table("estimates")
            .upsert(
                {
                    "session_id": str(session_id),
                    "nickname": nickname,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="session_id,nickname",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save estimate")
        return _estimate_from_row(response.data[0])

    def list_estimates(self, session_id: UUID) -> list[EstimateRecord]:
        """Return a session's estimates in join order."""
        response = (
            self.client.table("estimates")
            .select("id, session_id, nickname, value, created_at, updated_at")
            .eq("session_id", str(session_id))
            .order("created_at")
            .execute()
        )
        return [_estimate_from_row(row) for row in response.data or []]


def _estimate_from_row(row: dict[str, object]) -> EstimateRecord:
    return EstimateRecord(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        nickname=str(row["nickname"]),
        value=float(row.get("value") or 0),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
