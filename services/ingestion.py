"""Fetch sensor readings and append them to the current partition."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from functools import lru_cache
from threading import Lock

from models.records import Reading, epoch_millis, to_local
from sensors.client import FetchError, SensorClient, build_default_sensor_client
from storage.partition_store import PartitionStore, StorageWriteError, build_default_store
from storage.partitions import PartitionResolver, build_default_resolver

logger = logging.getLogger(__name__)


class IngestOutcome(str, Enum):
    stored = "stored"
    duplicate_hour = "duplicate_hour"
    fetch_failed = "fetch_failed"


class IngestionEngine:
    """Stores at most one reading per hour-of-day in each monthly partition."""

    def __init__(
        self,
        client: SensorClient,
        resolver: PartitionResolver,
        store: PartitionStore,
    ) -> None:
        self.client = client
        self.resolver = resolver
        self.store = store
        self._lock = Lock()

    def ingest(self, now: datetime) -> IngestOutcome:
        """Run one ingestion cycle stamped at ``now``.

        Fetch failures are logged and reported as ``fetch_failed`` without
        touching storage. ``StorageWriteError`` is logged and re-raised.
        """
        try:
            sample = self.client.fetch()
        except FetchError as exc:
            logger.warning(
                "Skipping ingestion, sensor fetch failed",
                extra={"reason": str(exc), "outcome": IngestOutcome.fetch_failed.value},
            )
            return IngestOutcome.fetch_failed

        reading = Reading(
            temperature=sample.temperature,
            humidity=sample.humidity,
            timestamp=epoch_millis(now),
        )
        tz = self.resolver.tz
        current_hour = to_local(now, tz).hour
        key = self.resolver.resolve(now)

        # Load, dedup and save as one step so overlapping triggers cannot
        # both store a reading for the same hour.
        with self._lock:
            location = self.resolver.locate(key)
            readings = self.store.load_or_create(location)

            if any(existing.local_time(tz).hour == current_hour for existing in readings):
                logger.info(
                    "Reading for the current hour already exists",
                    extra={
                        "partition": str(key),
                        "hour": current_hour,
                        "outcome": IngestOutcome.duplicate_hour.value,
                    },
                )
                return IngestOutcome.duplicate_hour

            readings.append(reading)
            try:
                self.store.save(location, readings)
            except StorageWriteError:
                logger.exception(
                    "Failed to save reading",
                    extra={"partition": str(key), "path": str(location)},
                )
                raise

        logger.info(
            "Reading stored",
            extra={
                "partition": str(key),
                "hour": current_hour,
                "timestamp": reading.timestamp,
                "reading_count": len(readings),
                "outcome": IngestOutcome.stored.value,
            },
        )
        return IngestOutcome.stored


@lru_cache
def build_default_ingestion_engine() -> IngestionEngine:
    return IngestionEngine(
        client=build_default_sensor_client(),
        resolver=build_default_resolver(),
        store=build_default_store(),
    )
