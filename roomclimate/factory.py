from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from roomclimate.api.router import api_router
from roomclimate.clients.openmeteo import OpenMeteoClient
from roomclimate.core.config import Settings, load_settings
from roomclimate.core.logging import configure_logging
from roomclimate.db.influx import create_influx_client
from roomclimate.services.outdoor import OutdoorConditionsCache, ProviderRefreshLimiter

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.influx_client = create_influx_client(settings)
        app.state.weather_client = OpenMeteoClient(
            user_agent=settings.weather_user_agent,
            timeout_seconds=settings.weather_timeout_seconds,
            base_url=settings.weather_base_url,
        )
        logger.info(
            "Starting roomclimate API",
            extra={"sensor": settings.sensor_id, "provider": settings.weather_base_url},
        )
        yield
        logger.info("Shutting down roomclimate API")
        app.state.weather_client.close()
        app.state.influx_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Room Climate API",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.weather_refresh_limiter = ProviderRefreshLimiter(
        min_interval_seconds=settings.weather_min_refresh_interval_seconds
    )
    app.state.history_refresh_limiter = ProviderRefreshLimiter(
        min_interval_seconds=settings.weather_min_refresh_interval_seconds
    )
    app.state.outdoor_cache = OutdoorConditionsCache()

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "roomclimate", "status": "ok"}

    app.include_router(api_router)
    return app
