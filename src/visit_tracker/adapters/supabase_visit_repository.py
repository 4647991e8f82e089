"""Supabase repository for visit records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from visit_tracker.domain.models import NewVisit, Visit
from visit_tracker.services.compliance import VisitRepository

_COLUMNS = (
    "id, telegram_id, first_name, username, shop_code, shop_name, location, "
    "photo_file_id, photo_file_path, captured_at"
)


@dataclass
class SupabaseVisitRepository(VisitRepository):
    """Supabase implementation for visit persistence."""

    client: Client

    def save_visit(self, visit: NewVisit) -> Visit:
        """Insert a visit row and return it."""
        response = (
            self.client.table("visits")
            .insert(
                {
                    "telegram_id": visit.telegram_id,
                    "first_name": visit.first_name,
                    "username": visit.username,
                    "shop_code": visit.shop_code,
                    "shop_name": visit.shop_name,
                    "location": {
                        "type": "Point",
                        "coordinates": [visit.longitude, visit.latitude],
                    },
                    "photo_file_id": visit.photo_file_id,
                    "photo_file_path": visit.photo_file_path,
                    "captured_at": visit.captured_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create visit")
        return _parse_row(response.data[0])

    def list_visits(self, start: datetime, end: datetime) -> list[Visit]:
        """Return visits captured within [start, end], oldest first."""
        response = (
            self.client.table("visits")
            .select(_COLUMNS)
            .gte("captured_at", start.isoformat())
            .lte("captured_at", end.isoformat())
            .order("captured_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> Visit:
    location = row.get("location") or {}
    longitude, latitude = location.get("coordinates") or (0.0, 0.0)
    return Visit(
        id=UUID(str(row["id"])),
        telegram_id=int(row["telegram_id"]),
        first_name=row.get("first_name"),
        username=row.get("username"),
        shop_code=row.get("shop_code"),
        shop_name=row.get("shop_name"),
        latitude=float(latitude),
        longitude=float(longitude),
        photo_file_id=str(row["photo_file_id"]),
        photo_file_path=row.get("photo_file_path"),
        captured_at=datetime.fromisoformat(str(row["captured_at"])),
    )
