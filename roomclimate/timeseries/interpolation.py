from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from roomclimate.models.reading import SeriesPoint


def interpolate(
    t0: datetime,
    t1: datetime,
    v0: float,
    v1: float,
    subinterval_minutes: int,
    max_points: int,
) -> list[SeriesPoint]:
    """Linear points strictly between two real samples.

    Point ``k`` sits at ``t0 + k * subinterval_minutes`` and is valued
    ``v0 + (v1 - v0) * k / (max_points + 1)``. Generation stops at the first
    instant that reaches ``t1``, so fewer than ``max_points`` may come back.
    """
    if subinterval_minutes <= 0:
        raise ValueError("subinterval_minutes must be a positive integer")
    if t1 <= t0 or max_points <= 0:
        return []

    step = timedelta(minutes=subinterval_minutes)
    diff = v1 - v0
    points: list[SeriesPoint] = []
    for k in range(1, max_points + 1):
        at = t0 + step * k
        if at >= t1:
            break
        value = round_tenth(v0 + diff * k / (max_points + 1))
        points.append(SeriesPoint(timestamp=at, value=value))
    return points


def round_tenth(value: float) -> float:
    """One decimal place, exact halves rounded away from zero."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def densify(
    points: Sequence[SeriesPoint], *, subinterval_minutes: int, max_points: int
) -> list[SeriesPoint]:
    """Each real point followed by its interpolated points toward the next one."""
    out: list[SeriesPoint] = []
    for i, point in enumerate(points):
        out.append(point)
        if i + 1 < len(points):
            following = points[i + 1]
            out.extend(
                interpolate(
                    point.timestamp,
                    following.timestamp,
                    point.value,
                    following.value,
                    subinterval_minutes,
                    max_points,
                )
            )
    return out
