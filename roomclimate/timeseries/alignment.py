"""Resampling of an independently sampled series onto a reference grid.

Values are copied from the nearest secondary sample, never blended, and no
staleness cutoff is applied: a grid point far from any sample still takes the
nearest value. Gaps left after matching are closed by a forward fill followed
by a backward fill, so ``None`` survives only when the secondary series is
empty.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from roomclimate.models.reading import SeriesPoint


def nearest_index(target: datetime, secondary: Sequence[SeriesPoint]) -> int | None:
    """Index of the sample closest in time; ties keep the earliest index."""
    best: int | None = None
    best_diff: float | None = None
    for j, point in enumerate(secondary):
        diff = abs((point.timestamp - target).total_seconds())
        if best_diff is None or diff < best_diff:
            best = j
            best_diff = diff
    return best


def fill_gaps(values: Sequence[float | None]) -> list[float | None]:
    filled = list(values)

    last: float | None = None
    for i, value in enumerate(filled):
        if value is not None:
            last = value
        elif last is not None:
            filled[i] = last

    last = None
    for i in range(len(filled) - 1, -1, -1):
        if filled[i] is not None:
            last = filled[i]
        elif last is not None:
            filled[i] = last

    return filled


def align(
    grid: Sequence[datetime], secondary: Sequence[SeriesPoint]
) -> list[float | None]:
    values: list[float | None] = [None] * len(grid)
    if not secondary:
        return values

    for i, at in enumerate(grid):
        j = nearest_index(at, secondary)
        if j is not None:
            values[i] = secondary[j].value

    return fill_gaps(values)
