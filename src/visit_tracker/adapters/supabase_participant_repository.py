"""Supabase-backed participant repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from visit_tracker.domain.models import Participant, Role
from visit_tracker.services.participants import ParticipantRepository

_COLUMNS = (
    "telegram_id, role, is_active, registered_at, first_name, username, "
    "employee_id, full_name"
)


@dataclass
class SupabaseParticipantRepository(ParticipantRepository):
    """Supabase implementation for participant persistence."""

    client: Client

    def get_participant(self, telegram_id: int) -> Participant | None:
        """Return the participant for a Telegram id, if present."""
        response = (
            self.client.table("participants")
            .select(_COLUMNS)
            .eq("telegram_id", telegram_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def create_participant(self, participant: Participant) -> Participant:
        """Insert a participant row and return it."""
        response = (
            self.client.table("participants")
            .insert(
                {
                    "telegram_id": participant.telegram_id,
                    "role": participant.role.value,
                    "is_active": participant.is_active,
                    "registered_at": participant.registered_at.isoformat(),
                    "first_name": participant.first_name,
                    "username": participant.username,
                    "employee_id": participant.employee_id,
                    "full_name": participant.full_name,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create participant in Supabase")
        return _parse_row(response.data[0])

    def set_active(self, telegram_id: int, is_active: bool) -> None:
        """Update the is_active flag for a participant."""
        self.client.table("participants").update({"is_active": is_active}).eq(
            "telegram_id", telegram_id
        ).execute()

    def list_participants(self, role: Role | None = None) -> list[Participant]:
        """Return participants, newest registrations first."""
        query = self.client.table("participants").select(_COLUMNS)
        if role is not None:
            query = query.eq("role", role.value)
        response = query.order("registered_at", desc=True).execute()
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> Participant:
    return Participant(
        telegram_id=int(row["telegram_id"]),
        role=Role(row.get("role") or Role.EMPLOYEE),
        is_active=bool(row.get("is_active", True)),
        registered_at=datetime.fromisoformat(str(row["registered_at"])),
        first_name=row.get("first_name"),
        username=row.get("username"),
        employee_id=row.get("employee_id"),
        full_name=row.get("full_name"),
    )
