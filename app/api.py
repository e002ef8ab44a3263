"""HTTP route definitions for the service."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.schemas import DaySummaryOut, IngestResponse, MessageResponse, ReadingOut
from services.ingestion import IngestionEngine, build_default_ingestion_engine
from services.query import (
    InvalidFilterValue,
    NoDataForDay,
    QueryEngine,
    build_default_query_engine,
)
from services.scheduler import Clock, utc_now

router = APIRouter()


def get_query_engine() -> QueryEngine:
    return build_default_query_engine()


def get_ingestion_engine() -> IngestionEngine:
    return build_default_ingestion_engine()


def get_clock() -> Clock:
    return utc_now


@router.get(
    "/weather",
    response_model=List[ReadingOut],
    summary="List readings of the current month, optionally filtered.",
)
async def list_weather(
    filter_by: Optional[str] = Query(
        None,
        alias="filterBy",
        description="One of day, month, year, hour or timestamp.",
    ),
    filter_value: Optional[str] = Query(None, alias="filterValue"),
    engine: QueryEngine = Depends(get_query_engine),
    clock: Clock = Depends(get_clock),
) -> List[ReadingOut]:
    try:
        readings = engine.readings(clock(), filter_by, filter_value)
    except InvalidFilterValue as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return [ReadingOut(**reading.to_dict()) for reading in readings]


@router.get(
    "/tempdata",
    response_model=DaySummaryOut,
    responses={status.HTTP_404_NOT_FOUND: {"model": MessageResponse}},
    summary="Highest and lowest temperature for one day of the current month.",
)
async def temperature_extremes(
    date: Optional[dt.date] = Query(None, description="ISO date; defaults to today."),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    engine: QueryEngine = Depends(get_query_engine),
    clock: Clock = Depends(get_clock),
):
    try:
        summary = engine.day_summary(clock(), day=date, month=month, year=year)
    except NoDataForDay as exc:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": str(exc)},
        )
    return DaySummaryOut(highest=summary.highest, lowest=summary.lowest, day=summary.day)


@router.post(
    "/ingest",
    response_model=IngestResponse,
    summary="Fetch one sensor reading now and store it if the hour is free.",
)
def trigger_ingestion(
    engine: IngestionEngine = Depends(get_ingestion_engine),
    clock: Clock = Depends(get_clock),
) -> IngestResponse:
    return IngestResponse(outcome=engine.ingest(clock()))


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
