from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from models.records import Reading, epoch_millis
from services.aggregator import Aggregator
from services.query import (
    NO_DATA_MESSAGE,
    InvalidFilterValue,
    NoDataForDay,
    QueryEngine,
    filter_readings,
)
from storage.partition_store import PartitionStore
from storage.partitions import PartitionResolver

UTC = timezone.utc


def _at(*args: int, temperature: float = 20.0) -> Reading:
    moment = datetime(*args, tzinfo=UTC)
    return Reading(temperature=temperature, humidity=45.0, timestamp=epoch_millis(moment))


@pytest.fixture()
def sample() -> list[Reading]:
    return [
        _at(2024, 1, 5, 3),
        _at(2024, 1, 5, 14),
        _at(2024, 2, 5, 3),
    ]


def test_filter_by_day(sample: list[Reading]) -> None:
    assert filter_readings(sample, "day", "2024-01-05", UTC) == sample[:2]


def test_filter_by_day_ignores_time_of_value(sample: list[Reading]) -> None:
    assert filter_readings(sample, "day", "2024-02-05T23:59:00", UTC) == [sample[2]]


def test_filter_by_hour(sample: list[Reading]) -> None:
    assert filter_readings(sample, "hour", "3", UTC) == [sample[0], sample[2]]


def test_filter_by_year(sample: list[Reading]) -> None:
    assert filter_readings(sample, "year", "2024", UTC) == sample
    assert filter_readings(sample, "year", "2023-06-01", UTC) == []


def test_filter_by_month(sample: list[Reading]) -> None:
    assert filter_readings(sample, "month", "2024-02-01", UTC) == [sample[2]]
    assert filter_readings(sample, "month", "2024-02", UTC) == [sample[2]]


def test_filter_by_exact_timestamp(sample: list[Reading]) -> None:
    value = str(sample[1].timestamp)

    assert filter_readings(sample, "timestamp", value, UTC) == [sample[1]]


def test_filter_accepts_full_iso_datetimes(sample: list[Reading]) -> None:
    assert filter_readings(sample, "month", "2024-01-31T23:00:00Z", UTC) == sample[:2]


def test_filter_compares_in_configured_timezone() -> None:
    from zoneinfo import ZoneInfo

    # 20:00 UTC is 01:30 the next day in IST.
    reading = _at(2024, 1, 5, 20)
    kolkata = ZoneInfo("Asia/Kolkata")

    assert filter_readings([reading], "hour", "1", kolkata) == [reading]
    assert filter_readings([reading], "day", "2024-01-06", kolkata) == [reading]


@pytest.mark.parametrize("criterion", [None, "", "week", "DAY"])
def test_unknown_or_missing_criterion_returns_input(
    sample: list[Reading], criterion: str | None
) -> None:
    assert filter_readings(sample, criterion, "whatever", UTC) == sample


@pytest.mark.parametrize(
    ("criterion", "value"),
    [
        ("day", "not-a-date"),
        ("month", None),
        ("hour", "three"),
        ("timestamp", ""),
    ],
)
def test_invalid_filter_value_raises(
    sample: list[Reading], criterion: str, value: str | None
) -> None:
    with pytest.raises(InvalidFilterValue):
        filter_readings(sample, criterion, value, UTC)


@pytest.fixture()
def engine(tmp_path: Path) -> QueryEngine:
    resolver = PartitionResolver(root_path=tmp_path, tz=UTC)
    return QueryEngine(resolver=resolver, store=PartitionStore(), aggregator=Aggregator())


def _seed(engine: QueryEngine, now: datetime, readings: list[Reading]) -> None:
    location = engine.resolver.locate(engine.resolver.resolve(now))
    engine.store.save(location, readings)


def test_readings_loads_current_partition_only(engine: QueryEngine) -> None:
    now = datetime(2024, 1, 20, 12, tzinfo=UTC)
    january = [_at(2024, 1, 5, 3), _at(2024, 1, 6, 4)]
    _seed(engine, now, january)
    _seed(engine, datetime(2024, 2, 1, tzinfo=UTC), [_at(2024, 2, 1, 0)])

    assert engine.readings(now) == january
    assert engine.readings(now, "hour", "4") == [january[1]]


def test_readings_creates_partition_on_first_access(engine: QueryEngine, tmp_path: Path) -> None:
    now = datetime(2024, 7, 1, tzinfo=UTC)

    assert engine.readings(now) == []
    assert (tmp_path / "data_2024" / "weather_data_July.json").exists()


def test_day_summary_defaults_to_today(engine: QueryEngine) -> None:
    now = datetime(2024, 3, 9, 18, tzinfo=UTC)
    _seed(
        engine,
        now,
        [
            _at(2024, 3, 8, 12, temperature=40.0),
            _at(2024, 3, 9, 1, temperature=10.0),
            _at(2024, 3, 9, 2, temperature=22.0),
            _at(2024, 3, 9, 3, temperature=15.0),
        ],
    )

    summary = engine.day_summary(now)

    assert summary.highest == 22.0
    assert summary.lowest == 10.0
    assert summary.day == "2024-3-9"


def test_day_summary_uses_explicit_parts(engine: QueryEngine) -> None:
    now = datetime(2024, 3, 9, 18, tzinfo=UTC)
    _seed(
        engine,
        now,
        [_at(2024, 3, 8, 12, temperature=40.0), _at(2024, 3, 8, 13, temperature=35.5)],
    )

    summary = engine.day_summary(now, day=date(2023, 1, 8), month=3, year=2024)

    assert (summary.highest, summary.lowest, summary.day) == (40.0, 35.5, "2024-3-8")


def test_day_summary_without_matches_raises(engine: QueryEngine) -> None:
    now = datetime(2024, 3, 9, 18, tzinfo=UTC)
    _seed(engine, now, [_at(2024, 3, 9, 1)])

    with pytest.raises(NoDataForDay) as excinfo:
        engine.day_summary(now, day=date(2099, 1, 1))

    assert str(excinfo.value) == NO_DATA_MESSAGE
    assert excinfo.value.day == "2099-1-1"
