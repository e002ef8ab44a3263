"""Aggregation logic for temperature readings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from models.records import Reading


@dataclass
class TemperatureSummary:
    """Extremes of the temperatures in a batch of readings."""

    count: int = 0
    highest: float | None = None
    lowest: float | None = None


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate_min_max(self, readings: Iterable[Reading]) -> TemperatureSummary:
        summary = TemperatureSummary()

        for reading in readings:
            summary.count += 1
            value = reading.temperature

            if summary.lowest is None or value < summary.lowest:
                summary.lowest = value
            if summary.highest is None or value > summary.highest:
                summary.highest = value

        return summary
