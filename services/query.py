"""Filtering and day-scoped aggregation over the current partition."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from functools import lru_cache
from typing import Iterable, List, Optional

from models.records import Reading, to_local
from services.aggregator import Aggregator
from storage.partition_store import PartitionStore, build_default_store
from storage.partitions import PartitionResolver, build_default_resolver

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available for the specified day."


class FilterCriterion(str, Enum):
    day = "day"
    month = "month"
    year = "year"
    hour = "hour"
    timestamp = "timestamp"


class InvalidFilterValue(ValueError):
    """A filter value could not be parsed for its criterion."""


class NoDataForDay(LookupError):
    """No readings matched a day-scoped query."""

    def __init__(self, day: str) -> None:
        super().__init__(NO_DATA_MESSAGE)
        self.day = day


@dataclass(frozen=True)
class DaySummary:
    highest: float
    lowest: float
    day: str


def _parse_partial_date(candidate: str) -> Optional[datetime]:
    for fmt in ("%Y-%m", "%Y"):
        try:
            return datetime.strptime(candidate, fmt)
        except ValueError:
            continue
    return None


def _parse_date_value(value: Optional[str], tz: Optional[tzinfo]) -> datetime:
    candidate = (value or "").strip()
    if not candidate:
        raise InvalidFilterValue("A date filter requires a value.")
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        parsed = _parse_partial_date(candidate)
        if parsed is None:
            raise InvalidFilterValue(f"Invalid date value {value!r}.") from None
    if parsed.tzinfo is not None:
        parsed = to_local(parsed, tz)
    return parsed


def _parse_int_value(value: Optional[str]) -> int:
    candidate = (value or "").strip()
    try:
        return int(candidate)
    except ValueError as exc:
        raise InvalidFilterValue(f"Invalid integer value {value!r}.") from exc


def filter_readings(
    readings: Iterable[Reading],
    criterion: Optional[str],
    value: Optional[str],
    tz: Optional[tzinfo] = None,
) -> List[Reading]:
    """Keep the readings matching ``criterion``/``value``.

    Calendar fields are compared in ``tz`` (system local zone when None).
    An unknown or missing criterion returns every reading.
    """
    items = list(readings)
    try:
        kind = FilterCriterion(criterion) if criterion else None
    except ValueError:
        logger.debug("Ignoring unknown filter", extra={"criterion": criterion})
        kind = None
    if kind is None:
        return items

    if kind is FilterCriterion.timestamp:
        target_timestamp = _parse_int_value(value)
        return [reading for reading in items if reading.timestamp == target_timestamp]

    if kind is FilterCriterion.day:
        target_date = _parse_date_value(value, tz).date()
        return [reading for reading in items if reading.local_time(tz).date() == target_date]

    # The remaining criteria name a datetime attribute.
    if kind is FilterCriterion.hour:
        target = _parse_int_value(value)
    else:
        target = getattr(_parse_date_value(value, tz), kind.value)
    return [
        reading for reading in items if getattr(reading.local_time(tz), kind.value) == target
    ]


class QueryEngine:
    """Read-side access to the partition of the current month."""

    def __init__(
        self,
        resolver: PartitionResolver,
        store: PartitionStore,
        aggregator: Aggregator,
    ) -> None:
        self.resolver = resolver
        self.store = store
        self.aggregator = aggregator

    def load_current(self, now: datetime) -> List[Reading]:
        key = self.resolver.resolve(now)
        return self.store.load_or_create(self.resolver.locate(key))

    def readings(
        self,
        now: datetime,
        criterion: Optional[str] = None,
        value: Optional[str] = None,
    ) -> List[Reading]:
        return filter_readings(self.load_current(now), criterion, value, self.resolver.tz)

    def day_summary(
        self,
        now: datetime,
        day: Optional[date] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> DaySummary:
        """Min/max temperature for one calendar day of the current partition.

        Unspecified parts default from ``day``, then from the local date of ``now``.
        """
        tz = self.resolver.tz
        target = day or to_local(now, tz).date()
        target_month = month if month is not None else target.month
        target_year = year if year is not None else target.year
        target_day = target.day
        label = f"{target_year}-{target_month}-{target_day}"

        matches = []
        for reading in self.load_current(now):
            local = reading.local_time(tz)
            if (
                local.year == target_year
                and local.month == target_month
                and local.day == target_day
            ):
                matches.append(reading)

        summary = self.aggregator.aggregate_min_max(matches)
        if summary.highest is None or summary.lowest is None:
            raise NoDataForDay(label)
        return DaySummary(highest=summary.highest, lowest=summary.lowest, day=label)


@lru_cache
def build_default_query_engine() -> QueryEngine:
    return QueryEngine(
        resolver=build_default_resolver(),
        store=build_default_store(),
        aggregator=Aggregator(),
    )
