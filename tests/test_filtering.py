from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from roomclimate.models.reading import Sample, SeriesPoint
from roomclimate.timeseries.alignment import align
from roomclimate.timeseries.filtering import filter_min_interval

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(offsets: list[int]) -> list[Sample]:
    return [
        Sample(timestamp=T0 + timedelta(seconds=s), temperature=20.0 + i, humidity=40.0)
        for i, s in enumerate(offsets)
    ]


def test_greedy_scan_measures_from_last_kept() -> None:
    series = _series([0, 50, 100, 160, 200, 250])

    kept = filter_min_interval(series, 100)

    assert [int((s.timestamp - T0).total_seconds()) for s in kept] == [0, 100, 200]


def test_output_spacing_respects_interval() -> None:
    series = _series([0, 7, 31, 45, 59, 90, 91, 150, 151, 152, 240])

    kept = filter_min_interval(series, 30)

    for prev, cur in zip(kept, kept[1:]):
        assert (cur.timestamp - prev.timestamp).total_seconds() >= 30


def test_filter_is_idempotent() -> None:
    series = _series([0, 10, 20, 35, 61, 62, 95, 130])

    once = filter_min_interval(series, 30)
    twice = filter_min_interval(once, 30)

    assert twice == once


def test_degenerate_inputs() -> None:
    assert filter_min_interval([], 60) == []
    single = _series([0])
    assert filter_min_interval(single, 60) == single


@pytest.mark.parametrize("interval", [0, -5])
def test_non_positive_interval_rejected(interval: int) -> None:
    with pytest.raises(ValueError):
        filter_min_interval(_series([0, 10]), interval)


def test_filtered_grid_aligns_back_to_source_values() -> None:
    series = [
        SeriesPoint(timestamp=T0 + timedelta(minutes=m), value=float(m) / 2)
        for m in (0, 4, 9, 15, 16, 30, 44, 47, 61)
    ]

    kept = filter_min_interval(series, 15 * 60)
    aligned = align([p.timestamp for p in kept], series)

    assert aligned == [p.value for p in kept]
