from __future__ import annotations

import logging
from datetime import datetime, timezone

from roomclimate.models.reading import Sample
from roomclimate.repositories.base import ReadingRepository
from roomclimate.schemas.readings import ReadingCreate
from roomclimate.timeseries.filtering import filter_min_interval

logger = logging.getLogger(__name__)


class ReadingService:
    def __init__(self, repo: ReadingRepository) -> None:
        self._repo = repo

    def record(self, payload: ReadingCreate, *, now: datetime | None = None) -> Sample:
        sample = Sample(
            timestamp=now or datetime.now(tz=timezone.utc),
            temperature=payload.temperature,
            humidity=payload.humidity,
        )
        self._repo.write_reading(sample)
        return sample

    def current(self) -> Sample | None:
        return self._repo.query_latest()

    def history(
        self, *, start: datetime, stop: datetime, interval_seconds: int
    ) -> list[Sample]:
        # Validate before hitting storage.
        if interval_seconds <= 0:
            raise ValueError("Interval must be a positive integer (in seconds).")
        rows = self._repo.query_range(start=start, stop=stop)
        kept = filter_min_interval(rows, interval_seconds)
        logger.debug(
            "Filtered reading range",
            extra={"rows": len(rows), "kept": len(kept), "interval_seconds": interval_seconds},
        )
        return kept
