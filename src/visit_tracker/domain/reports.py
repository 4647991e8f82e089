"""Domain models for visit reports."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ReportRange:
    """Inclusive time window covered by a report."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class ReportColumn:
    """Spreadsheet column definition."""

    key: str
    header: str
    width: int
    kind: type = str


@dataclass(frozen=True)
class ReportDocument:
    """Tabular report ready for spreadsheet serialization."""

    filename: str
    sheet_name: str
    columns: tuple[ReportColumn, ...]
    rows: list[dict[str, object]] = field(default_factory=list)

    @property
    def headers(self) -> list[str]:
        return [column.header for column in self.columns]
