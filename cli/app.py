from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_day_summary, render_readings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying the hourly weather logger service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:5000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("readings")
def readings_command(
    ctx: typer.Context,
    filter_by: Optional[str] = typer.Option(
        None,
        "--filter-by",
        "-f",
        help="Filter criterion: day, month, year, hour or timestamp.",
    ),
    value: Optional[str] = typer.Option(
        None,
        "--value",
        "-v",
        help="Value for the filter criterion, e.g. 2024-01-05 or 14.",
    ),
) -> None:
    """List readings stored for the current month."""
    state = _get_state(ctx)
    if filter_by and value is None:
        raise typer.BadParameter("--value is required when --filter-by is given.")
    payload = state.client.list_readings(filter_by=filter_by, value=value)
    render_readings(payload)


@app.command("tempdata")
def tempdata_command(
    ctx: typer.Context,
    date: Optional[str] = typer.Option(None, "--date", help="ISO date, defaults to today."),
    month: Optional[int] = typer.Option(None, "--month", min=1, max=12),
    year: Optional[int] = typer.Option(None, "--year"),
) -> None:
    """Show the highest and lowest temperature for a day."""
    state = _get_state(ctx)
    payload = state.client.get_day_summary(date=date, month=month, year=year)
    render_day_summary(payload)


@app.command("ingest")
def ingest_command(ctx: typer.Context) -> None:
    """Ask the service to fetch and store a reading now."""
    state = _get_state(ctx)
    outcome = state.client.trigger_ingestion()
    color = typer.colors.GREEN if outcome == "stored" else typer.colors.YELLOW
    typer.secho(f"Ingestion outcome: {outcome}", fg=color)
