"""Map instants to monthly storage partitions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from models.records import to_local
from settings import get_settings

# Fixed English names so file names do not depend on the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class PartitionKey:
    year: int
    month_name: str

    def __str__(self) -> str:
        return f"{self.year}/{self.month_name}"


class PartitionResolver:

    def __init__(self, root_path: Path, tz: Optional[tzinfo] = None) -> None:
        self.root_path = root_path
        self.tz = tz

    def resolve(self, now: datetime) -> PartitionKey:
        local = to_local(now, self.tz)
        return PartitionKey(year=local.year, month_name=MONTH_NAMES[local.month - 1])

    def locate(self, key: PartitionKey) -> Path:
        """Return the file backing ``key``, creating its year directory if needed."""
        year_dir = self.root_path / f"data_{key.year}"
        year_dir.mkdir(parents=True, exist_ok=True)
        return year_dir / f"weather_data_{key.month_name}.json"


def load_timezone(name: Optional[str]) -> Optional[tzinfo]:
    return ZoneInfo(name) if name else None


@lru_cache
def build_default_resolver(root_path: Optional[str] = None) -> PartitionResolver:
    settings = get_settings()
    root = settings.data_root_path if root_path is None else root_path
    return PartitionResolver(root_path=Path(root), tz=load_timezone(settings.timezone))
