from __future__ import annotations

import json
from datetime import date, datetime, timezone

import httpx
import pytest

from roomclimate.clients.openmeteo import OpenMeteoClient
from roomclimate.models.weather import Location
from roomclimate.sensor.transport import IngestClient

HERE = Location(lat=50.0, lon=15.0)


def _meteo(handler) -> OpenMeteoClient:
    return OpenMeteoClient(
        user_agent="test-agent",
        timeout_seconds=1.0,
        base_url="https://meteo.test/v1/forecast",
        transport=httpx.MockTransport(handler),
    )


def test_hourly_temperatures_parsed_as_utc() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "hourly": {
                    "time": ["2024-05-01T10:00", "2024-05-01T11:00", "2024-05-01T12:00"],
                    "temperature_2m": [10.0, None, 12.5],
                }
            },
        )

    points = _meteo(handler).fetch_hourly_temperatures(
        HERE, start_date=date(2024, 4, 30), end_date=date(2024, 5, 1)
    )

    assert seen["hourly"] == "temperature_2m"
    assert seen["start_date"] == "2024-04-30"
    assert seen["timezone"] == "UTC"
    assert [(p.timestamp.hour, p.value) for p in points] == [(10, 10.0), (12, 12.5)]
    assert points[0].timestamp.tzinfo is not None


def test_hourly_temperatures_accepts_flat_array() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"date": "2024-05-01T11:00:00Z", "temperature": 9.0},
                {"date": "2024-05-01T10:00:00Z", "temperature": 8.0},
            ],
        )

    points = _meteo(handler).fetch_hourly_temperatures(
        HERE, start_date=date(2024, 5, 1), end_date=date(2024, 5, 1)
    )

    assert [p.value for p in points] == [8.0, 9.0]


def test_hourly_temperatures_rejects_unknown_shape() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": True, "reason": "bad"})

    with pytest.raises(ValueError):
        _meteo(handler).fetch_hourly_temperatures(
            HERE, start_date=date(2024, 5, 1), end_date=date(2024, 5, 1)
        )


def test_current_conditions_pick_current_hour_probability() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "current": {"time": "2024-05-01T11:45", "temperature_2m": 14.2, "precipitation": 0.1},
                "hourly": {
                    "time": ["2024-05-01T10:00", "2024-05-01T11:00", "2024-05-01T12:00"],
                    "precipitation_probability": [5, 35, 80],
                },
            },
        )

    now = datetime(2024, 5, 1, 11, 50, tzinfo=timezone.utc)
    conditions = _meteo(handler).fetch_current(HERE, now=now)

    assert conditions.temperature == 14.2
    assert conditions.precipitation == 0.1
    assert conditions.rain_probability == 35.0
    assert conditions.timestamp == datetime(2024, 5, 1, 11, 45, tzinfo=timezone.utc)


def test_current_conditions_http_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502)

    with pytest.raises(httpx.HTTPStatusError):
        _meteo(handler).fetch_current(HERE)


def test_ingest_client_posts_json() -> None:
    received: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/readings"
        received.append(json.loads(request.content))
        return httpx.Response(201, json={"written_at": "2024-05-01T10:00:00Z"})

    client = IngestClient(
        base_url="http://api.test/", timeout_seconds=1.0, transport=httpx.MockTransport(handler)
    )

    assert client.send(21.5, 44.0) is True
    assert received == [{"temperature": 21.5, "humidity": 44.0}]


def test_ingest_client_reports_failures_without_raising() -> None:
    def rejecting(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "InfluxDB unavailable"})

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route to host", request=request)

    for handler in (rejecting, unreachable):
        client = IngestClient(
            base_url="http://api.test", timeout_seconds=1.0, transport=httpx.MockTransport(handler)
        )
        assert client.send(21.5, 44.0) is False
