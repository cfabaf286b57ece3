from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

import httpx

from roomclimate.core.config import OPEN_METEO_FORECAST_URL
from roomclimate.models.reading import SeriesPoint
from roomclimate.models.weather import Location, OutdoorConditions


def _parse_time(value: str) -> datetime:
    # Open-Meteo with timezone=UTC: "2026-01-30T22:00" (no offset)
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class OpenMeteoClient:
    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float,
        base_url: str = OPEN_METEO_FORECAST_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def fetch_current(
        self, location: Location, *, now: datetime | None = None
    ) -> OutdoorConditions:
        resp = self._client.get(
            self._base_url,
            params={
                "latitude": location.lat,
                "longitude": location.lon,
                "current": "temperature_2m,precipitation",
                "hourly": "precipitation_probability",
                "forecast_days": 1,
                "timezone": "UTC",
            },
        )
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError("Unexpected Open-Meteo response shape")

        now = now or datetime.now(tz=timezone.utc)
        current: dict[str, Any] = payload.get("current") or {}
        hourly: dict[str, Any] = payload.get("hourly") or {}

        timestamp = now
        if isinstance(current.get("time"), str):
            timestamp = _parse_time(current["time"])

        probabilities = hourly.get("precipitation_probability")
        rain_probability: float | None = None
        if isinstance(probabilities, list) and probabilities:
            index = self._current_hour_index(hourly.get("time"), now)
            if index < len(probabilities):
                rain_probability = _float_or_none(probabilities[index])

        return OutdoorConditions(
            timestamp=timestamp,
            temperature=_float_or_none(current.get("temperature_2m")),
            precipitation=_float_or_none(current.get("precipitation")),
            rain_probability=rain_probability,
        )

    def fetch_hourly_temperatures(
        self, location: Location, *, start_date: date, end_date: date
    ) -> list[SeriesPoint]:
        resp = self._client.get(
            self._base_url,
            params={
                "latitude": location.lat,
                "longitude": location.lon,
                "hourly": "temperature_2m",
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "timezone": "UTC",
            },
        )
        resp.raise_for_status()
        return self._parse_hourly(resp.json())

    @staticmethod
    def _parse_hourly(payload: Any) -> list[SeriesPoint]:
        # Proxies in front of the provider may flatten the series into
        # [{"date": ..., "temperature": ...}, ...].
        if isinstance(payload, list):
            times = [item.get("date") for item in payload if isinstance(item, dict)]
            temps = [item.get("temperature") for item in payload if isinstance(item, dict)]
        else:
            try:
                times = payload["hourly"]["time"]
                temps = payload["hourly"]["temperature_2m"]
            except (KeyError, TypeError) as e:
                raise ValueError("Unexpected Open-Meteo response shape") from e
            if not isinstance(times, list) or not isinstance(temps, list):
                raise ValueError("Open-Meteo hourly series must be arrays")

        points: list[SeriesPoint] = []
        for raw_time, raw_temp in zip(times, temps):
            value = _float_or_none(raw_temp)
            if not isinstance(raw_time, str) or value is None:
                continue
            points.append(SeriesPoint(timestamp=_parse_time(raw_time), value=value))
        points.sort(key=lambda p: p.timestamp)
        return points

    @staticmethod
    def _current_hour_index(times: Any, now: datetime) -> int:
        if not isinstance(times, list):
            return 0
        hour = now.astimezone(timezone.utc).replace(minute=0, second=0, microsecond=0)
        for i, raw in enumerate(times):
            if not isinstance(raw, str):
                continue
            try:
                at = _parse_time(raw)
            except ValueError:
                continue
            if at.replace(minute=0, second=0, microsecond=0) == hour:
                return i
        return 0


def _float_or_none(v: Any) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None
