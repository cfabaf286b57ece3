from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ReadingCreate(BaseModel):
    temperature: float
    humidity: float

    @field_validator("temperature", "humidity")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Invalid temperature or humidity values (must be finite).")
        return v


class ReadingWriteResponse(BaseModel):
    written_at: datetime


class ReadingRead(BaseModel):
    temperature: float
    humidity: float
    timestamp: datetime


class ReadingRange(BaseModel):
    start: datetime
    end: datetime
    interval_seconds: int = Field(ge=1)
    readings: list[ReadingRead] = Field(default_factory=list)
