"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Mapping, Optional


def to_local(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express ``moment`` in ``tz``, or in the system local zone when ``tz`` is None.

    Naive datetimes are taken to be system local time.
    """
    return moment.astimezone(tz)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass(frozen=True, slots=True)
class Reading:
    """A single temperature/humidity sample stamped at ingestion time."""

    temperature: float
    humidity: float
    timestamp: int

    def local_time(self, tz: Optional[tzinfo] = None) -> datetime:
        moment = datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)
        return to_local(moment, tz)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Reading":
        """Build a reading from its stored JSON form.

        Raises ``ValueError`` when a field is missing or has the wrong type.
        """
        try:
            temperature = payload["temperature"]
            humidity = payload["humidity"]
            timestamp = payload["timestamp"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Reading is missing a required field: {exc}") from exc

        for name, value in (("temperature", temperature), ("humidity", humidity)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Reading field {name!r} must be numeric, got {value!r}.")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError(f"Reading timestamp must be numeric, got {timestamp!r}.")

        return cls(
            temperature=temperature,
            humidity=humidity,
            timestamp=int(timestamp),
        )
