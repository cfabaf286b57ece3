from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from roomclimate.api.deps import get_reading_repository, get_reading_service
from roomclimate.repositories.base import ReadingRepository
from roomclimate.schemas.readings import (
    ReadingCreate,
    ReadingRange,
    ReadingRead,
    ReadingWriteResponse,
)
from roomclimate.services.readings import ReadingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/readings")


def _to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _storage_unavailable(e: Exception, action: str) -> HTTPException:
    logger.error("InfluxDB %s failed", action, extra={"error": repr(e)})
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="InfluxDB unavailable",
    )


@router.post(
    "",
    response_model=ReadingWriteResponse,
    status_code=status.HTTP_201_CREATED,
)
def write_reading(
    payload: ReadingCreate,
    service: Annotated[ReadingService, Depends(get_reading_service)],
) -> ReadingWriteResponse:
    try:
        sample = service.record(payload)
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        raise _storage_unavailable(e, "write") from e
    logger.info(
        "Stored reading",
        extra={"temperature": sample.temperature, "humidity": sample.humidity},
    )
    return ReadingWriteResponse(written_at=sample.timestamp)


@router.get("/current", response_model=ReadingRead)
def current_reading(
    service: Annotated[ReadingService, Depends(get_reading_service)],
) -> ReadingRead:
    try:
        sample = service.current()
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        raise _storage_unavailable(e, "latest query") from e
    if sample is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No readings yet")
    return ReadingRead.model_validate(sample.__dict__)


@router.get("/range", response_model=ReadingRange)
def reading_range(
    start: Annotated[datetime, Query()],
    end: Annotated[datetime, Query()],
    interval: Annotated[int, Query(description="Minimum spacing in seconds")],
    service: Annotated[ReadingService, Depends(get_reading_service)],
) -> ReadingRange:
    start_dt = _to_utc(start)
    end_dt = _to_utc(end)
    if start_dt > end_dt:
        raise HTTPException(status_code=400, detail="'start' must be <= 'end'")
    try:
        rows = service.history(start=start_dt, stop=end_dt, interval_seconds=interval)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        raise _storage_unavailable(e, "range query") from e
    return ReadingRange(
        start=start_dt,
        end=end_dt,
        interval_seconds=interval,
        readings=[ReadingRead.model_validate(r.__dict__) for r in rows],
    )


@router.get("/health", tags=["meta"])
def health(
    repo: Annotated[ReadingRepository, Depends(get_reading_repository)],
) -> dict[str, str]:
    try:
        repo.ping()
    except Exception as e:  # noqa: BLE001 - expose as 503 without leaking internals
        raise _storage_unavailable(e, "ping") from e
    return {"status": "ok"}
