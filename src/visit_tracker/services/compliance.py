"""Daily reporting coverage checks."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from visit_tracker.domain.models import NewVisit, Visit


class VisitRepository(Protocol):
    """Persistence interface for visits."""

    def save_visit(self, visit: NewVisit) -> Visit:
        """Insert a visit and return the stored record."""

    def list_visits(self, start: datetime, end: datetime) -> list[Visit]:
        """Return visits captured within [start, end], oldest first."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ComplianceAggregator:
    """Checks whether every roster member has visited today."""

    repository: VisitRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = _utc_now

    async def all_submitted_today(self, roster: set[int]) -> bool:
        """Return True when each roster member has a visit since local midnight.

        An empty roster is never considered complete.
        """
        if not roster:
            return False
        now = self.clock().astimezone(self.timezone)
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        visits = await asyncio.to_thread(self.repository.list_visits, midnight, now)
        reported = {visit.telegram_id for visit in visits}
        return roster <= reported
