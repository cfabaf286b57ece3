"""Fixed-capacity circular buffers for smoothing raw sensor samples."""

from __future__ import annotations


class RollingWindow:
    """Circular buffer holding the most recent ``capacity`` samples.

    The window never reallocates. Until it has wrapped once, only the first
    ``write_index`` slots are valid; afterwards every slot is.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        self._capacity = int(capacity)
        self._slots: list[float] = [0.0] * self._capacity
        self._write_index = 0
        self._filled = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def write_index(self) -> int:
        return self._write_index

    @property
    def filled(self) -> bool:
        return self._filled

    @property
    def count(self) -> int:
        return self._capacity if self._filled else self._write_index

    @property
    def has_samples(self) -> bool:
        return self._filled or self._write_index > 0

    def push(self, value: float) -> None:
        self._slots[self._write_index] = float(value)
        self._write_index = (self._write_index + 1) % self._capacity
        if self._write_index == 0:
            self._filled = True

    def average(self) -> float:
        """Mean of the valid slots, or ``0.0`` when nothing was pushed yet.

        ``0.0`` is not a "no data" marker; check :attr:`has_samples` first.
        """
        count = self.count
        if count == 0:
            return 0.0
        return sum(self._slots[:count]) / count

    def values(self) -> list[float]:
        return list(self._slots[: self.count])


class RollingAverager:
    """Pairs a temperature window and a humidity window of equal capacity."""

    def __init__(self, capacity: int) -> None:
        self._temperature = RollingWindow(capacity)
        self._humidity = RollingWindow(capacity)

    @property
    def capacity(self) -> int:
        return self._temperature.capacity

    @property
    def has_samples(self) -> bool:
        return self._temperature.has_samples

    @property
    def count(self) -> int:
        return self._temperature.count

    def push(self, temperature: float, humidity: float) -> None:
        self._temperature.push(temperature)
        self._humidity.push(humidity)

    def averages(self) -> tuple[float, float]:
        return self._temperature.average(), self._humidity.average()
