"""Approximate running median over a bounded reservoir of samples."""

from __future__ import annotations

import random
from typing import Generic, List, TypeVar

T = TypeVar("T")


class StatisticalMedianFilter(Generic[T]):
    """Running median estimate using reservoir sampling."""

    def __init__(self, queue_size: int, seed: int) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be positive")
        self.queue_size = queue_size
        self._rng = random.Random(seed)
        self._total_num_data = 0
        self._values: List[T] = []

    def push(self, value: T) -> None:
        """Offer a new sample to the reservoir."""
        self._total_num_data += 1
        if len(self._values) < self.queue_size:
            self._values.append(value)
            return

        if self._rng.randint(0, self._total_num_data) >= self.queue_size:
            return

        self._values[self._rng.randint(0, self.queue_size - 1)] = value

    def median(self) -> T:
        """Return the middle element of the retained samples."""
        if not self._values:
            raise ValueError("median of an empty filter")
        return sorted(self._values)[len(self._values) // 2]