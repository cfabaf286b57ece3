from __future__ import annotations

import math
import random
from typing import Any, Protocol

TEMPERATURE_RANGE = (-40.0, 80.0)
HUMIDITY_RANGE = (0.0, 100.0)


class SensorReader(Protocol):
    def read(self) -> tuple[float, float] | None:
        """Return ``(temperature, humidity)`` or ``None`` on a failed read."""
        ...


def validate_reading(raw: Any) -> tuple[float, float] | None:
    """Normalise a raw sensor answer, or ``None`` when it must be dropped."""
    if raw is None:
        return None
    try:
        temperature, humidity = raw
        temperature = float(temperature)
        humidity = float(humidity)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(temperature) and math.isfinite(humidity)):
        return None
    if not TEMPERATURE_RANGE[0] <= temperature <= TEMPERATURE_RANGE[1]:
        return None
    if not HUMIDITY_RANGE[0] <= humidity <= HUMIDITY_RANGE[1]:
        return None
    return temperature, humidity


class SimulatedSensorReader:
    """Bounded random walk standing in for a DHT-style probe."""

    def __init__(
        self,
        *,
        temperature: float = 21.0,
        humidity: float = 45.0,
        temperature_step: float = 0.05,
        humidity_step: float = 0.2,
        fault_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self._temperature = temperature
        self._humidity = humidity
        self._temperature_step = temperature_step
        self._humidity_step = humidity_step
        self._fault_rate = fault_rate
        self._rng = rng or random.Random()

    def read(self) -> tuple[float, float] | None:
        if self._fault_rate and self._rng.random() < self._fault_rate:
            return (math.nan, math.nan)
        self._temperature = _clamp(
            self._temperature + self._rng.uniform(-self._temperature_step, self._temperature_step),
            *TEMPERATURE_RANGE,
        )
        self._humidity = _clamp(
            self._humidity + self._rng.uniform(-self._humidity_step, self._humidity_step),
            *HUMIDITY_RANGE,
        )
        return round(self._temperature, 1), round(self._humidity, 1)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
