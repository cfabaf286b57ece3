from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from roomclimate.core.config import Settings
from roomclimate.models.reading import Sample, SeriesPoint
from roomclimate.models.weather import OutdoorConditions
from roomclimate.services.outdoor import OutdoorWeatherService, default_history_window
from roomclimate.services.readings import ReadingService
from roomclimate.timeseries.alignment import align
from roomclimate.timeseries.interpolation import densify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemperatureBands:
    cold_below: float = 15.0
    cool_below: float = 20.0
    normal_below: float = 25.0
    warm_below: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> TemperatureBands:
        return cls(
            cold_below=settings.band_cold_below,
            cool_below=settings.band_cool_below,
            normal_below=settings.band_normal_below,
            warm_below=settings.band_warm_below,
        )

    def classify(self, temperature: float) -> str:
        if temperature < self.cold_below:
            return "cold"
        if temperature < self.cool_below:
            return "cool"
        if temperature < self.normal_below:
            return "normal"
        if temperature < self.warm_below:
            return "warm"
        return "hot"


def is_stale(timestamp: datetime, *, now: datetime, max_age_seconds: int) -> bool:
    return (now - timestamp).total_seconds() > max_age_seconds


@dataclass(frozen=True)
class IndoorSnapshot:
    sample: Sample
    stale: bool
    band: str


@dataclass(frozen=True)
class OutdoorSnapshot:
    conditions: OutdoorConditions
    band: str | None


@dataclass(frozen=True)
class CurrentView:
    generated_at: datetime
    indoor: IndoorSnapshot | None
    outdoor: OutdoorSnapshot | None


@dataclass(frozen=True)
class AlignedPoint:
    label: str
    timestamp: datetime
    outdoor: float
    indoor: float | None


@dataclass(frozen=True)
class HistoryView:
    start: datetime
    end: datetime
    points: list[AlignedPoint]


class DashboardService:
    """Builds the live panel and the 24h indoor/outdoor chart."""

    def __init__(
        self,
        *,
        readings: ReadingService,
        outdoor: OutdoorWeatherService,
        settings: Settings,
    ) -> None:
        self._readings = readings
        self._outdoor = outdoor
        self._settings = settings
        self._bands = TemperatureBands.from_settings(settings)
        self._tz = _display_zone(settings.display_timezone)

    def current(self, *, now: datetime | None = None) -> CurrentView:
        now = now or datetime.now(tz=timezone.utc)

        indoor: IndoorSnapshot | None = None
        sample = self._readings.current()
        if sample is not None:
            indoor = IndoorSnapshot(
                sample=sample,
                stale=is_stale(
                    sample.timestamp,
                    now=now,
                    max_age_seconds=self._settings.indoor_data_max_age_seconds,
                ),
                band=self._bands.classify(sample.temperature),
            )

        outdoor: OutdoorSnapshot | None = None
        conditions = self._outdoor.current(now=now)
        if conditions is not None:
            outdoor = OutdoorSnapshot(
                conditions=conditions,
                band=(
                    self._bands.classify(conditions.temperature)
                    if conditions.temperature is not None
                    else None
                ),
            )

        return CurrentView(generated_at=now, indoor=indoor, outdoor=outdoor)

    def history(self, *, now: datetime | None = None) -> HistoryView:
        now = now or datetime.now(tz=timezone.utc)
        start, end = default_history_window(now, self._settings.history_hours)

        hourly = self._outdoor.hourly_history(start=start, stop=end)
        grid = densify(
            hourly,
            subinterval_minutes=self._settings.interpolation_subinterval_minutes,
            max_points=self._settings.interpolation_points,
        )

        indoor_rows = self._readings.history(
            start=start, stop=end, interval_seconds=self._settings.history_interval_seconds
        )
        indoor = sorted(
            (SeriesPoint(timestamp=s.timestamp, value=s.temperature) for s in indoor_rows),
            key=lambda p: p.timestamp,
        )
        indoor_values = align([p.timestamp for p in grid], indoor)

        if grid and not indoor:
            logger.info("No indoor readings to overlay", extra={"rows": len(grid)})

        points = [
            AlignedPoint(
                label=self._label(p.timestamp),
                timestamp=p.timestamp,
                outdoor=p.value,
                indoor=value,
            )
            for p, value in zip(grid, indoor_values)
        ]
        return HistoryView(start=start, end=end, points=points)

    def _label(self, ts: datetime) -> str:
        return ts.astimezone(self._tz).strftime("%H:%M")


def _display_zone(name: str):
    if name.strip().upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
