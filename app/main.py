from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.api import router
from logging_config import configure_logging
from sensors.client import build_default_sensor_client
from services.ingestion import build_default_ingestion_engine
from services.query import build_default_query_engine
from services.scheduler import build_default_scheduler
from settings import get_settings
from storage.partition_store import StorageWriteError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    scheduler = build_default_scheduler() if get_settings().scheduler_enabled else None
    if scheduler is not None:
        scheduler.start()
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.stop()
        build_default_sensor_client().close()
        build_default_sensor_client.cache_clear()
        build_default_ingestion_engine.cache_clear()
        build_default_query_engine.cache_clear()


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


async def storage_write_error_handler(_request: Request, exc: StorageWriteError) -> JSONResponse:
    logger.error("Request failed while writing storage", extra={"reason": str(exc)})
    return _internal_error()


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error serving request",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return _internal_error()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Hourly Weather Logger",
        description="Hourly sensor ingestion into monthly JSON partitions with simple queries.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(StorageWriteError, storage_write_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)
    return app

app = create_app()
