"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from pydantic import BaseModel, Field

from services.ingestion import IngestOutcome


class ReadingOut(BaseModel):
    """A stored temperature/humidity sample."""

    temperature: float
    humidity: float
    timestamp: int = Field(..., description="Epoch milliseconds at ingestion time.")


class DaySummaryOut(BaseModel):
    """Temperature extremes for one calendar day."""

    highest: float
    lowest: float
    day: str = Field(..., description="Day as <year>-<month>-<day>, not zero padded.")


class IngestResponse(BaseModel):
    outcome: IngestOutcome


class MessageResponse(BaseModel):
    message: str
