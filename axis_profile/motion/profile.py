"""
Common interface for single-axis motion profiles.

A profile is a precomputed function of elapsed time returning the
position/velocity setpoint for one controlled axis. Concrete shapes
(trapezoidal today) subclass MotionProfile; callers only depend on
calculate(), total_time() and is_finished().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from axis_profile.config import CONTROL_RATE_HZ


@dataclass(frozen=True)
class ProfileState:
    """A point in the 1-D motion of the controlled axis."""

    position: float = 0.0
    velocity: float = 0.0


def _samples_for_duration(duration: float, sample_rate: float) -> int:
    if duration <= 0:
        return 2
    n = int(round(duration * sample_rate)) + 1
    return max(2, n)


class MotionProfile(ABC):
    """
    Base class for a motion profile.

    Implementations are immutable after construction: every query is a pure
    function of the time argument, so a profile can be shared between threads.
    """

    __slots__ = ()

    @abstractmethod
    def calculate(self, t: float) -> ProfileState:
        """Setpoint at time t, where the profile started at t=0."""
        ...

    @abstractmethod
    def total_time(self) -> float:
        """Duration of the profile in seconds."""
        ...

    def is_finished(self, t: float) -> bool:
        return t > self.total_time()

    def sample_many(
        self, times: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Evaluate the profile at many times.

        Returns:
            (positions, velocities) arrays with the shape of ``times``
        """
        t_arr = np.asarray(times, dtype=np.float64)
        positions = np.empty(t_arr.shape, dtype=np.float64)
        velocities = np.empty(t_arr.shape, dtype=np.float64)
        for idx, t in np.ndenumerate(t_arr):
            state = self.calculate(float(t))
            positions[idx] = state.position
            velocities[idx] = state.velocity
        return positions, velocities

    def sample(
        self, sample_rate: float | None = None
    ) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """
        Sample the whole profile at a fixed rate, endpoints included.

        Args:
            sample_rate: Samples per second (default CONTROL_RATE_HZ)

        Returns:
            (times, positions, velocities), each of shape (N,) with N >= 2
        """
        sr = CONTROL_RATE_HZ if sample_rate is None else float(sample_rate)
        if sr <= 0:
            raise ValueError("sample_rate must be positive")
        duration = self.total_time()
        times = np.linspace(0.0, duration, _samples_for_duration(duration, sr))
        positions, velocities = self.sample_many(times)
        return times, positions, velocities
