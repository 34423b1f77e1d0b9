"""Fixed-period history of scalar samples with look-back by time."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


class History:
    """Circular buffer of samples recorded once per fixed period.

    Answers "what was the value N seconds ago" by counting back
    round(N / period_s) updates from the newest sample. Look-backs past the
    oldest retained sample return the oldest one.
    """

    __slots__ = (
        "_buffer",
        "_buffer_idx",
        "_buffer_count",
        "_buffer_mask",
        "_period_s",
    )

    def __init__(self, capacity: int, period_s: float) -> None:
        """
        Args:
            capacity: Number of samples to retain. Rounded up to power of 2.
            period_s: Time between successive update() calls in seconds.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity!r}")
        if not period_s > 0:
            raise ValueError(f"period_s must be positive, got {period_s!r}")
        # Round up to power of 2 for fast modulo via bitmask
        size = 1
        while size < capacity:
            size <<= 1
        self._buffer = np.zeros(size, dtype=np.float64)
        self._buffer_mask = size - 1
        self._buffer_idx = 0
        self._buffer_count = 0
        self._period_s = float(period_s)

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    @property
    def period_s(self) -> float:
        return self._period_s

    def __len__(self) -> int:
        return self._buffer_count

    def update(self, value: float) -> None:
        """Record the sample for the current period."""
        self._buffer[self._buffer_idx] = value
        self._buffer_idx = (self._buffer_idx + 1) & self._buffer_mask
        if self._buffer_count < len(self._buffer):
            self._buffer_count += 1

    def latest(self) -> float:
        return self.go_back(0.0)

    def go_back(self, seconds: float) -> float:
        """Value recorded `seconds` ago (clamped to the retained window)."""
        if self._buffer_count == 0:
            raise IndexError("history is empty")
        steps = int(round(max(seconds, 0.0) / self._period_s))
        steps = min(steps, self._buffer_count - 1)
        return float(self._buffer[(self._buffer_idx - 1 - steps) & self._buffer_mask])

    def to_array(self) -> NDArray[np.float64]:
        """Retained samples, oldest first."""
        n = self._buffer_count
        idx = (self._buffer_idx - n + np.arange(n)) & self._buffer_mask
        return self._buffer[idx].copy()

    def reset(self) -> None:
        """Reset all state."""
        self._buffer[:] = 0.0
        self._buffer_idx = 0
        self._buffer_count = 0
