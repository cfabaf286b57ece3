from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol, TypeVar


class Timestamped(Protocol):
    @property
    def timestamp(self) -> datetime: ...


T = TypeVar("T", bound=Timestamped)


def filter_min_interval(series: Iterable[T], min_interval_seconds: int) -> list[T]:
    """Greedy down-sampling of an ascending series.

    The first item is always kept. Each later item is kept only when it lies
    at least ``min_interval_seconds`` after the last *kept* item.
    """
    if min_interval_seconds <= 0:
        raise ValueError("Interval must be a positive integer (in seconds).")

    kept: list[T] = []
    last_kept: T | None = None
    for item in series:
        if (
            last_kept is None
            or (item.timestamp - last_kept.timestamp).total_seconds() >= min_interval_seconds
        ):
            kept.append(item)
            last_kept = item
    return kept
