from __future__ import annotations

import logging
import threading
from datetime import date, datetime, timedelta, timezone
from typing import Protocol

from roomclimate.models.reading import SeriesPoint
from roomclimate.models.weather import Location, OutdoorConditions

logger = logging.getLogger(__name__)


class WeatherProvider(Protocol):
    def fetch_current(
        self, location: Location, *, now: datetime | None = None
    ) -> OutdoorConditions: ...

    def fetch_hourly_temperatures(
        self, location: Location, *, start_date: date, end_date: date
    ) -> list[SeriesPoint]: ...


class ProviderRefreshLimiter:
    def __init__(self, *, min_interval_seconds: int) -> None:
        self._min_interval_seconds = max(int(min_interval_seconds), 0)
        self._lock = threading.Lock()
        self._last_attempt: datetime | None = None

    @property
    def min_interval_seconds(self) -> int:
        return self._min_interval_seconds

    def try_acquire(self, *, now: datetime) -> tuple[bool, int]:
        if self._min_interval_seconds <= 0:
            return True, 0

        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        with self._lock:
            if self._last_attempt is None:
                self._last_attempt = now
                return True, 0

            elapsed = (now - self._last_attempt).total_seconds()
            if elapsed >= self._min_interval_seconds:
                self._last_attempt = now
                return True, 0

            retry_after = int(self._min_interval_seconds - elapsed)
            return False, max(retry_after, 1)


class OutdoorConditionsCache:
    """Last known provider answers, shared across requests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._conditions: OutdoorConditions | None = None
        self._history: list[SeriesPoint] = []

    def update(self, conditions: OutdoorConditions) -> None:
        with self._lock:
            self._conditions = conditions

    def get(self) -> OutdoorConditions | None:
        with self._lock:
            return self._conditions

    def update_history(self, points: list[SeriesPoint]) -> None:
        with self._lock:
            self._history = list(points)

    def history(self) -> list[SeriesPoint]:
        with self._lock:
            return list(self._history)


class OutdoorWeatherService:
    def __init__(
        self,
        *,
        provider: WeatherProvider,
        location: Location,
        refresh_limiter: ProviderRefreshLimiter | None = None,
        history_limiter: ProviderRefreshLimiter | None = None,
        cache: OutdoorConditionsCache | None = None,
    ) -> None:
        self._provider = provider
        self._location = location
        self._refresh_limiter = refresh_limiter
        self._history_limiter = history_limiter
        self._cache = cache

    def current(self, *, now: datetime) -> OutdoorConditions | None:
        allowed = True
        if self._refresh_limiter is not None:
            allowed, _ = self._refresh_limiter.try_acquire(now=now)

        if allowed or self._cache is None or self._cache.get() is None:
            try:
                conditions = self._provider.fetch_current(self._location, now=now)
            except Exception as e:  # noqa: BLE001 - provider errors degrade to cache
                logger.warning(
                    "Outdoor conditions unavailable",
                    extra={"provider": type(self._provider).__name__, "error": repr(e)},
                )
            else:
                if self._cache is not None:
                    self._cache.update(conditions)
                return conditions

        return self._cache.get() if self._cache is not None else None

    def hourly_history(self, *, start: datetime, stop: datetime) -> list[SeriesPoint]:
        """Hourly outdoor temperatures within ``[start, stop]``, oldest first.

        ``stop`` doubles as the refresh clock: while the history limiter
        refuses and a series is cached, the cached series is served.
        """
        allowed = True
        if self._history_limiter is not None:
            allowed, _ = self._history_limiter.try_acquire(now=stop)
        if not allowed and self._cache is not None:
            cached = self._cache.history()
            if cached:
                return [p for p in cached if start <= p.timestamp <= stop]

        try:
            points = self._provider.fetch_hourly_temperatures(
                self._location,
                start_date=start.astimezone(timezone.utc).date(),
                end_date=stop.astimezone(timezone.utc).date(),
            )
        except Exception as e:  # noqa: BLE001 - provider errors degrade to cache
            logger.warning(
                "Outdoor history unavailable",
                extra={"provider": type(self._provider).__name__, "error": repr(e)},
            )
            points = self._cache.history() if self._cache is not None else []
        else:
            if self._cache is not None:
                self._cache.update_history(points)
        return [p for p in points if start <= p.timestamp <= stop]


def default_history_window(now: datetime, hours: int) -> tuple[datetime, datetime]:
    return now - timedelta(hours=hours), now
