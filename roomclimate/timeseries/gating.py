"""Decides whether a smoothed reading is worth transmitting."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


class SendReason(str, enum.Enum):
    TEMP_CHANGE = "TEMP_CHANGE"
    HUMIDITY_CHANGE = "HUMIDITY_CHANGE"
    FORCE_INTERVAL = "FORCE_INTERVAL"


@dataclass(frozen=True)
class SendState:
    last_sent_temperature: float
    last_sent_humidity: float
    last_send_time: datetime

    @classmethod
    def never_sent(cls) -> SendState:
        return cls(
            last_sent_temperature=0.0,
            last_sent_humidity=0.0,
            last_send_time=datetime.min.replace(tzinfo=timezone.utc),
        )

    def after_attempt(
        self, temperature: float, humidity: float, now: datetime
    ) -> SendState:
        # Advanced on every attempt, including failed transmissions.
        return SendState(
            last_sent_temperature=temperature,
            last_sent_humidity=humidity,
            last_send_time=now,
        )


@dataclass(frozen=True)
class GateDecision:
    send: bool
    reasons: frozenset[SendReason]

    def __bool__(self) -> bool:
        return self.send


def should_send(
    avg_temperature: float,
    avg_humidity: float,
    now: datetime,
    state: SendState,
    *,
    temperature_threshold: float,
    humidity_threshold: float,
    force_interval: timedelta,
) -> GateDecision:
    reasons: set[SendReason] = set()
    if abs(avg_temperature - state.last_sent_temperature) >= temperature_threshold:
        reasons.add(SendReason.TEMP_CHANGE)
    if abs(avg_humidity - state.last_sent_humidity) >= humidity_threshold:
        reasons.add(SendReason.HUMIDITY_CHANGE)
    if now - state.last_send_time >= force_interval:
        reasons.add(SendReason.FORCE_INTERVAL)
    return GateDecision(send=bool(reasons), reasons=frozenset(reasons))
