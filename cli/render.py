from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Sequence

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_timestamp(value: Any) -> str:
    if not isinstance(value, (int, float)):
        return str(value)
    return datetime.fromtimestamp(value / 1000).isoformat(timespec="seconds")


def render_readings(readings: Sequence[Dict[str, Any]]) -> None:
    echo_heading(f"Readings ({len(readings)})")
    if not readings:
        typer.echo("No readings recorded.")
        return
    for reading in readings:
        typer.echo(
            f"  - {_format_timestamp(reading.get('timestamp'))}"
            f"  temperature={reading.get('temperature')}"
            f"  humidity={reading.get('humidity')}"
        )


def render_day_summary(payload: Dict[str, Any]) -> None:
    echo_heading("Temperature Extremes")
    echo_key_values(
        [
            ("day", payload.get("day")),
            ("highest", payload.get("highest")),
            ("lowest", payload.get("lowest")),
        ]
    )
