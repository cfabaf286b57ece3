from __future__ import annotations

from datetime import datetime
from typing import Protocol

from roomclimate.models.reading import Sample


class ReadingRepository(Protocol):
    def ping(self) -> None: ...

    def write_reading(self, sample: Sample) -> None: ...

    def query_latest(self) -> Sample | None: ...

    def query_range(self, *, start: datetime, stop: datetime) -> list[Sample]:
        """Readings with ``start <= timestamp <= stop``, oldest first."""
        ...
