from __future__ import annotations

import json
import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List, Sequence

from models.records import Reading

logger = logging.getLogger(__name__)

# Process umask, captured at import.
_UMASK = os.umask(0)
os.umask(_UMASK)


class StorageWriteError(RuntimeError):
    """Raised when a partition file cannot be written."""


class PartitionStore:
    """Whole-file JSON persistence for one partition at a time."""

    def load_or_create(self, location: Path) -> List[Reading]:
        """Return the readings stored at ``location``.

        A missing partition is created empty and persisted. A partition that
        exists but cannot be read or parsed is logged and treated as empty.
        """
        try:
            raw = location.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("Creating new partition", extra={"path": str(location)})
            self.save(location, [])
            return []
        except (OSError, UnicodeDecodeError):
            logger.exception(
                "Failed to read partition", extra={"path": str(location), "reason": "io"}
            )
            return []

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"Expected a JSON array, got {type(payload).__name__}.")
            readings = [Reading.from_dict(item) for item in payload]
        except ValueError:
            logger.exception(
                "Failed to parse partition",
                extra={"path": str(location), "reason": "corrupt"},
            )
            return []

        return readings

    def save(self, location: Path, readings: Sequence[Reading]) -> None:
        """Replace the contents of ``location`` with ``readings``."""
        payload = json.dumps([reading.to_dict() for reading in readings], indent=2)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=location.parent, prefix=f".{location.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.chmod(tmp_name, 0o666 & ~_UMASK)
            os.replace(tmp_name, location)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageWriteError(f"Could not write partition {location}: {exc}") from exc

        logger.debug(
            "Partition saved",
            extra={"path": str(location), "reading_count": len(readings)},
        )


@lru_cache
def build_default_store() -> PartitionStore:
    return PartitionStore()
