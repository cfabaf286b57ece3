from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Sample:
    timestamp: datetime
    temperature: float
    humidity: float


@dataclass(frozen=True)
class SeriesPoint:
    timestamp: datetime
    value: float
