from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float


@dataclass(frozen=True)
class OutdoorConditions:
    timestamp: datetime
    temperature: float | None = None
    precipitation: float | None = None
    rain_probability: float | None = None
