from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..core.enums import Granularity


@dataclass(frozen=True)
class Bucket:
    """Calendar-aligned slot ``[start, end)`` with a stable label."""

    label: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class SeriesPoint:
    label: str
    total_minutes: int


@dataclass(frozen=True)
class CategoryTotal:
    category_name: str
    minutes: int


@dataclass(frozen=True)
class StatsResult:
    granularity: Granularity
    range_start: datetime
    range_end: datetime
    time_series: list[SeriesPoint] = field(default_factory=list)
    by_category: list[CategoryTotal] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "granularity": self.granularity.value,
            "range_start": self.range_start.isoformat(),
            "range_end": self.range_end.isoformat(),
            "time_series": [{"label": p.label, "total_minutes": p.total_minutes} for p in self.time_series],
            "by_category": [{"category_name": c.category_name, "minutes": c.minutes} for c in self.by_category],
        }
