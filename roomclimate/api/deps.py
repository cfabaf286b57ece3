from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from roomclimate.core.config import Settings
from roomclimate.db.influx import build_reading_repository
from roomclimate.models.weather import Location
from roomclimate.repositories.base import ReadingRepository
from roomclimate.services.dashboard import DashboardService
from roomclimate.services.outdoor import (
    OutdoorConditionsCache,
    OutdoorWeatherService,
    ProviderRefreshLimiter,
    WeatherProvider,
)
from roomclimate.services.readings import ReadingService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_reading_repository(
    request: Request, settings: Annotated[Settings, Depends(get_settings)]
) -> ReadingRepository:
    return build_reading_repository(request.app.state.influx_client, settings)


def get_weather_provider(request: Request) -> WeatherProvider:
    return request.app.state.weather_client


def get_refresh_limiter(request: Request) -> ProviderRefreshLimiter | None:
    limiter = getattr(request.app.state, "weather_refresh_limiter", None)
    if not isinstance(limiter, ProviderRefreshLimiter):
        return None
    return limiter


def get_history_refresh_limiter(request: Request) -> ProviderRefreshLimiter | None:
    limiter = getattr(request.app.state, "history_refresh_limiter", None)
    if not isinstance(limiter, ProviderRefreshLimiter):
        return None
    return limiter


def get_outdoor_cache(request: Request) -> OutdoorConditionsCache | None:
    cache = getattr(request.app.state, "outdoor_cache", None)
    if not isinstance(cache, OutdoorConditionsCache):
        return None
    return cache


def get_reading_service(
    repo: Annotated[ReadingRepository, Depends(get_reading_repository)],
) -> ReadingService:
    return ReadingService(repo)


def get_outdoor_service(
    settings: Annotated[Settings, Depends(get_settings)],
    provider: Annotated[WeatherProvider, Depends(get_weather_provider)],
    limiter: Annotated[ProviderRefreshLimiter | None, Depends(get_refresh_limiter)],
    history_limiter: Annotated[
        ProviderRefreshLimiter | None, Depends(get_history_refresh_limiter)
    ],
    cache: Annotated[OutdoorConditionsCache | None, Depends(get_outdoor_cache)],
) -> OutdoorWeatherService:
    return OutdoorWeatherService(
        provider=provider,
        location=Location(lat=settings.weather_latitude, lon=settings.weather_longitude),
        refresh_limiter=limiter,
        history_limiter=history_limiter,
        cache=cache,
    )


def get_dashboard_service(
    settings: Annotated[Settings, Depends(get_settings)],
    readings: Annotated[ReadingService, Depends(get_reading_service)],
    outdoor: Annotated[OutdoorWeatherService, Depends(get_outdoor_service)],
) -> DashboardService:
    return DashboardService(readings=readings, outdoor=outdoor, settings=settings)
