from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from roomclimate.sensor.reader import SensorReader, validate_reading
from roomclimate.timeseries.gating import GateDecision, SendState, should_send
from roomclimate.timeseries.rolling import RollingAverager

logger = logging.getLogger(__name__)


class Transmitter(Protocol):
    def send(self, temperature: float, humidity: float) -> bool: ...


@dataclass(frozen=True)
class TickResult:
    accepted: bool
    decision: GateDecision | None = None
    sent: bool | None = None
    average: tuple[float, float] | None = None


class SensorAgent:
    """One sequential read, push, gate and send cycle per tick."""

    def __init__(
        self,
        *,
        reader: SensorReader,
        transmitter: Transmitter,
        window_size: int = 10,
        temperature_threshold: float = 0.2,
        humidity_threshold: float = 0.5,
        force_interval: timedelta = timedelta(minutes=15),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._reader = reader
        self._transmitter = transmitter
        self._averager = RollingAverager(window_size)
        self._temperature_threshold = temperature_threshold
        self._humidity_threshold = humidity_threshold
        self._force_interval = force_interval
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self.state = SendState.never_sent()

    @property
    def averager(self) -> RollingAverager:
        return self._averager

    def tick(self, now: datetime | None = None) -> TickResult:
        now = now or self._clock()

        try:
            raw = self._reader.read()
        except Exception as e:  # noqa: BLE001 - treated as a failed read
            logger.warning("Sensor read failed", extra={"error": repr(e)})
            raw = None

        reading = validate_reading(raw)
        if reading is None:
            logger.warning("Dropped invalid reading", extra={"error": repr(raw)})
        else:
            self._averager.push(*reading)

        if not self._averager.has_samples:
            return TickResult(accepted=reading is not None)

        avg_temperature, avg_humidity = self._averager.averages()
        decision = should_send(
            avg_temperature,
            avg_humidity,
            now,
            self.state,
            temperature_threshold=self._temperature_threshold,
            humidity_threshold=self._humidity_threshold,
            force_interval=self._force_interval,
        )
        if not decision.send:
            return TickResult(
                accepted=reading is not None,
                decision=decision,
                average=(avg_temperature, avg_humidity),
            )

        reasons = ",".join(sorted(r.value for r in decision.reasons))
        try:
            sent = self._transmitter.send(avg_temperature, avg_humidity)
        except Exception as e:  # noqa: BLE001 - transport errors count as a failed attempt
            logger.error("Transmission raised", extra={"error": repr(e), "reasons": reasons})
            sent = False

        self.state = self.state.after_attempt(avg_temperature, avg_humidity, now)
        logger.info(
            "Transmitted reading" if sent else "Transmission failed",
            extra={
                "temperature": round(avg_temperature, 2),
                "humidity": round(avg_humidity, 2),
                "reasons": reasons,
            },
        )
        return TickResult(
            accepted=reading is not None,
            decision=decision,
            sent=sent,
            average=(avg_temperature, avg_humidity),
        )

    def run(
        self,
        *,
        interval_seconds: float,
        stop_event: threading.Event,
        max_iterations: int | None = None,
    ) -> int:
        iterations = 0
        logger.info("Sensor loop started", extra={"interval_seconds": interval_seconds})
        while not stop_event.is_set():
            try:
                self.tick()
            except Exception as e:  # noqa: BLE001 - keep sampling on unexpected errors
                logger.exception("Sensor tick failed", extra={"error": repr(e)})
            iterations += 1
            if max_iterations is not None and iterations >= max_iterations:
                break
            stop_event.wait(interval_seconds)
        logger.info("Sensor loop stopped", extra={"rows": iterations})
        return iterations
