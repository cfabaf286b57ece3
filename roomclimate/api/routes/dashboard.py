from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from roomclimate.api.deps import get_dashboard_service
from roomclimate.schemas.dashboard import (
    ChartPoint,
    DashboardCurrent,
    DashboardHistory,
    IndoorNow,
    OutdoorNow,
)
from roomclimate.services.dashboard import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard")


@router.get("/current", response_model=DashboardCurrent)
def dashboard_current(
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> DashboardCurrent:
    try:
        view = service.current()
    except Exception as e:  # noqa: BLE001
        logger.error("Dashboard current view failed", extra={"error": repr(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="InfluxDB unavailable",
        ) from e

    indoor = None
    if view.indoor is not None:
        indoor = IndoorNow(
            temperature=view.indoor.sample.temperature,
            humidity=view.indoor.sample.humidity,
            timestamp=view.indoor.sample.timestamp,
            stale=view.indoor.stale,
            band=view.indoor.band,
        )
    outdoor = None
    if view.outdoor is not None:
        outdoor = OutdoorNow(**view.outdoor.conditions.__dict__, band=view.outdoor.band)
    return DashboardCurrent(generated_at=view.generated_at, indoor=indoor, outdoor=outdoor)


@router.get("/history", response_model=DashboardHistory)
def dashboard_history(
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> DashboardHistory:
    try:
        view = service.history()
    except Exception as e:  # noqa: BLE001
        logger.error("Dashboard history failed", extra={"error": repr(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="InfluxDB unavailable",
        ) from e
    return DashboardHistory(
        start=view.start,
        end=view.end,
        points=[ChartPoint.model_validate(p.__dict__) for p in view.points],
    )
