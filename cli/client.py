from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the weather logger service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def list_readings(
        self, filter_by: Optional[str] = None, value: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {}
        if filter_by:
            params["filterBy"] = filter_by
        if value is not None:
            params["filterValue"] = value
        try:
            response = self._client.get("/weather", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, list):
            raise typer.BadParameter("Unexpected response payload when listing readings.")
        return payload

    def get_day_summary(
        self,
        date: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if date:
            params["date"] = date
        if month is not None:
            params["month"] = month
        if year is not None:
            params["year"] = year
        try:
            response = self._client.get("/tempdata", params=params)
            if response.status_code == 404:
                message = response.json().get("message", "No data available.")
                typer.secho(message, fg=typer.colors.YELLOW, err=True)
                raise typer.Exit(code=1)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def trigger_ingestion(self) -> str:
        try:
            response = self._client.post("/ingest")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        outcome = response.json().get("outcome")
        if not isinstance(outcome, str):
            raise typer.BadParameter("Unexpected response payload when triggering ingestion.")
        return outcome

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail") or data.get("error")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
