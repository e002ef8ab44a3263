from __future__ import annotations

import logging
import sys

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.ingestion",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Reading stored",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_keys_in_order() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(hour=9, partition="2024/May", unrelated="x"))

    assert line == "Reading stored | partition=2024/May hour=9"


def test_formatter_skips_missing_and_none_values() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    assert formatter.format(_record(reason=None)) == "Reading stored"


def test_formatter_keeps_context_on_first_line_of_tracebacks() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", context_keys=["path"])
    try:
        raise ValueError("bad json")
    except ValueError:
        record = _record(path="/data/x.json")
        record.exc_info = sys.exc_info()

    first_line, _, rest = formatter.format(record).partition("\n")

    assert first_line == "Reading stored | path=/data/x.json"
    assert "ValueError: bad json" in rest


def test_formatter_ignores_extra_keys_it_does_not_know() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(status_code=500, outcome="stored"))

    assert line == "Reading stored | outcome=stored"
