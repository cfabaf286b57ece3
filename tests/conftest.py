from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from roomclimate.api import deps
from roomclimate.core.config import Settings
from roomclimate.factory import create_app
from tests.fakes import FakeReadingRepository, FakeWeatherProvider


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        log_level="WARNING",
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        influx_url="http://example.com:8086",
        influx_token="test-token-1234567890",
        influx_org="test",
        influx_bucket="test",
        influx_timeout_ms=5000,
        readings_measurement="sensor_readings",
        sensor_id="indoor",
        weather_user_agent="test-agent",
        weather_timeout_seconds=1.0,
        weather_min_refresh_interval_seconds=0,
        indoor_data_max_age_seconds=60,
        history_hours=24,
        history_interval_seconds=900,
    )


@pytest.fixture()
def fake_repo() -> FakeReadingRepository:
    return FakeReadingRepository()


@pytest.fixture()
def fake_weather() -> FakeWeatherProvider:
    return FakeWeatherProvider()


@pytest.fixture()
def client(
    settings: Settings,
    fake_repo: FakeReadingRepository,
    fake_weather: FakeWeatherProvider,
) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_reading_repository] = lambda: fake_repo
    app.dependency_overrides[deps.get_weather_provider] = lambda: fake_weather
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def now() -> datetime:
    return datetime.now(tz=timezone.utc)
