"""Background thread that triggers ingestion at the top of every hour."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from threading import Event, Thread
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from services.ingestion import build_default_ingestion_engine
from settings import get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_top_of_hour(moment: datetime, tz: tzinfo) -> datetime:
    """First minute-zero boundary in ``tz`` strictly after ``moment``."""
    local = moment.astimezone(tz)
    floored = local.replace(minute=0, second=0, microsecond=0)
    # Step in UTC so a repeated DST hour still gets its own tick.
    return floored.astimezone(timezone.utc) + timedelta(hours=1)


class HourlyScheduler:

    def __init__(
        self,
        job: Callable[[datetime], object],
        tz: tzinfo,
        clock: Clock = utc_now,
        run_on_start: bool = True,
    ) -> None:
        self.job = job
        self.tz = tz
        self.clock = clock
        self.run_on_start = run_on_start
        self._stop = Event()
        self._thread: Optional[Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = Thread(target=self._run, name="hourly-ingestion", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run_once(self) -> None:
        """Invoke the job once, logging instead of raising on failure."""
        now = self.clock()
        try:
            outcome = self.job(now)
        except Exception:  # noqa: BLE001 - the next tick is the retry
            logger.exception("Scheduled ingestion failed")
            return
        logger.debug(
            "Scheduled ingestion finished",
            extra={"outcome": getattr(outcome, "value", outcome)},
        )

    def _run(self) -> None:
        if self.run_on_start:
            self.run_once()
        while not self._stop.is_set():
            due = next_top_of_hour(self.clock(), self.tz)
            delay = max((due - self.clock()).total_seconds(), 0.0)
            if self._stop.wait(delay):
                break
            self.run_once()


def build_default_scheduler() -> HourlyScheduler:
    settings = get_settings()
    engine = build_default_ingestion_engine()
    return HourlyScheduler(job=engine.ingest, tz=ZoneInfo(settings.schedule_timezone))
