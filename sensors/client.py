"""HTTP client for the weather sensor endpoint."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from settings import get_settings


class FetchError(RuntimeError):
    """The sensor could not be reached or returned an unusable payload."""


class SensorSample(BaseModel):
    """Body returned by the sensor; unknown keys are ignored."""

    temperature: float
    humidity: float


class SensorClient:

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> SensorSample:
        try:
            response = self._client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"Sensor responded with status {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Sensor request failed: {exc}") from exc

        try:
            return SensorSample.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise FetchError(f"Sensor returned a malformed payload: {exc}") from exc


@lru_cache
def build_default_sensor_client() -> SensorClient:
    settings = get_settings()
    return SensorClient(url=settings.sensor_url, timeout=settings.sensor_timeout)
