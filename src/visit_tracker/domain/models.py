"""Domain models for the visit tracker."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Role(StrEnum):
    """Participant roles."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


@dataclass(frozen=True)
class Participant:
    """Represents a registered bot user."""

    telegram_id: int
    role: Role
    is_active: bool
    registered_at: datetime
    first_name: str | None = None
    username: str | None = None
    employee_id: str | None = None
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return (
            self.full_name or self.first_name or self.username or str(self.telegram_id)
        )


@dataclass(frozen=True)
class Shop:
    """A shop identified by the code printed in its QR sticker."""

    code: str
    name: str


@dataclass(frozen=True)
class NewVisit:
    """Visit data captured by a completed flow, before persistence."""

    telegram_id: int
    latitude: float
    longitude: float
    photo_file_id: str
    captured_at: datetime
    shop_code: str | None = None
    shop_name: str | None = None
    photo_file_path: str | None = None
    first_name: str | None = None
    username: str | None = None


@dataclass(frozen=True)
class Visit:
    """A persisted visit record."""

    id: UUID
    telegram_id: int
    latitude: float
    longitude: float
    photo_file_id: str
    captured_at: datetime
    shop_code: str | None = None
    shop_name: str | None = None
    photo_file_path: str | None = None
    first_name: str | None = None
    username: str | None = None

    @property
    def coordinates(self) -> list[float]:
        """Return the point in GeoJSON order (longitude, latitude)."""
        return [self.longitude, self.latitude]


@dataclass(frozen=True)
class Sender:
    """The Telegram user behind an inbound event."""

    telegram_id: int
    first_name: str | None = None
    username: str | None = None


@dataclass(frozen=True)
class PhotoSubmission:
    """A photo message reduced to what the visit flow needs."""

    file_id: str
    forwarded: bool = False
