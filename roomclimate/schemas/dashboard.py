from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

TemperatureBand = Literal["cold", "cool", "normal", "warm", "hot"]


class IndoorNow(BaseModel):
    temperature: float
    humidity: float
    timestamp: datetime
    stale: bool
    band: TemperatureBand


class OutdoorNow(BaseModel):
    timestamp: datetime
    temperature: float | None = None
    precipitation: float | None = None
    rain_probability: float | None = Field(default=None, ge=0, le=100)
    band: TemperatureBand | None = None


class DashboardCurrent(BaseModel):
    generated_at: datetime
    indoor: IndoorNow | None = None
    outdoor: OutdoorNow | None = None


class ChartPoint(BaseModel):
    label: str
    timestamp: datetime
    outdoor: float
    indoor: float | None = None


class DashboardHistory(BaseModel):
    start: datetime
    end: datetime
    points: list[ChartPoint] = Field(default_factory=list)
