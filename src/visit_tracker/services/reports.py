"""Visit reports over a date range."""

import asyncio
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from visit_tracker.domain.errors import InvalidArgument
from visit_tracker.domain.models import Visit
from visit_tracker.domain.reports import ReportColumn, ReportDocument, ReportRange
from visit_tracker.services.compliance import VisitRepository

_DATE_ARG = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
RANGE_USAGE = "Invalid argument. Use: /report day | week | YYYY-MM-DD"

REPORT_COLUMNS = (
    ReportColumn("telegram_id", "TelegramId", 12, int),
    ReportColumn("employee", "Employee", 24),
    ReportColumn("shop_code", "ShopCode", 12),
    ReportColumn("shop_name", "ShopName", 24),
    ReportColumn("timestamp", "Timestamp", 20),
    ReportColumn("lat", "Latitude", 12, float),
    ReportColumn("lng", "Longitude", 12, float),
    ReportColumn("photo_id", "PhotoFileId", 44),
    ReportColumn("photo_url", "PhotoUrl", 60),
)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def resolve_range(arg: str, now: datetime) -> ReportRange:
    """Translate a report argument into a time window around ``now``.

    ``day`` covers today, ``week`` runs from Monday 00:00 of the current week
    up to ``now`` and ``YYYY-MM-DD`` covers that calendar date. Boundaries
    use the timezone of ``now``.
    """
    if arg == "day":
        return ReportRange(start=_start_of_day(now), end=_end_of_day(now))
    if arg == "week":
        monday = now - timedelta(days=now.weekday())
        return ReportRange(start=_start_of_day(monday), end=now)
    if _DATE_ARG.match(arg):
        try:
            parsed = datetime.strptime(arg, "%Y-%m-%d").replace(tzinfo=now.tzinfo)
        except ValueError as exc:
            raise InvalidArgument(RANGE_USAGE) from exc
        return ReportRange(start=_start_of_day(parsed), end=_end_of_day(parsed))
    raise InvalidArgument(RANGE_USAGE)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _no_photo_url(_file_path: str) -> str:
    return ""


@dataclass
class ReportGenerator:
    """Builds tabular visit reports."""

    repository: VisitRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    photo_url: Callable[[str], str] = _no_photo_url
    clock: Callable[[], datetime] = _utc_now

    async def generate_report(self, range_arg: str) -> ReportDocument:
        """Return the report document for a range argument.

        Raises ``InvalidArgument`` for anything other than ``day``, ``week``
        or a ``YYYY-MM-DD`` date.
        """
        now = self.clock().astimezone(self.timezone)
        window = resolve_range(range_arg, now)
        visits = await asyncio.to_thread(
            self.repository.list_visits, window.start, window.end
        )
        visits = sorted(visits, key=lambda visit: visit.captured_at)
        return ReportDocument(
            filename=f"report_{range_arg}.xlsx",
            sheet_name="Visits",
            columns=REPORT_COLUMNS,
            rows=[self._row(visit) for visit in visits],
        )

    def _row(self, visit: Visit) -> dict[str, object]:
        return {
            "telegram_id": visit.telegram_id,
            "employee": visit.first_name or visit.username or str(visit.telegram_id),
            "shop_code": visit.shop_code or "",
            "shop_name": visit.shop_name or "",
            "timestamp": visit.captured_at.astimezone(self.timezone).strftime(
                TIMESTAMP_FORMAT
            ),
            "lat": visit.latitude,
            "lng": visit.longitude,
            "photo_id": visit.photo_file_id,
            "photo_url": (
                self.photo_url(visit.photo_file_path) if visit.photo_file_path else ""
            ),
        }
