"""Monotonic clock, delays and loop pacing with hybrid sleep + busy-loop."""

from __future__ import annotations

import logging
import time

from axis_profile import config as cfg

logger = logging.getLogger(__name__)


def now() -> float:
    """Monotonic time in seconds from an arbitrary origin."""
    return time.perf_counter()


def sleep_until(deadline: float, busy_threshold_s: float | None = None) -> None:
    """Block until now() reaches deadline.

    Uses time.sleep() for most of the wait, then busy-loops for the final
    busy_threshold_s to avoid OS scheduling jitter. Past deadlines return
    immediately.
    """
    threshold = (
        busy_threshold_s
        if busy_threshold_s is not None
        else cfg.BUSY_THRESHOLD_MS / 1000.0
    )
    sleep_time = deadline - time.perf_counter()
    if sleep_time > threshold:
        time.sleep(sleep_time - threshold)
    while time.perf_counter() < deadline:
        pass


def sleep_for(duration: float, busy_threshold_s: float | None = None) -> None:
    """Block for duration seconds. Non-positive durations return immediately."""
    if duration <= 0:
        return
    sleep_until(time.perf_counter() + duration, busy_threshold_s)


class Timer:
    """Elapsed-time stopwatch on the monotonic clock.

    Usage:
        timer = Timer()
        timer.start()
        ...
        setpoint = profile.calculate(timer.get())
    """

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start: float | None = None

    @property
    def running(self) -> bool:
        return self._start is not None

    def start(self) -> None:
        """Start (or restart) timing from now."""
        self._start = time.perf_counter()

    def reset(self) -> None:
        """Restart from zero. Same as start()."""
        self.start()

    def get(self) -> float:
        """Seconds since start(); 0.0 if never started."""
        if self._start is None:
            return 0.0
        return time.perf_counter() - self._start


class LoopTimer:
    """Deadline-based loop timing with hybrid sleep + busy-loop.

    Uses time.sleep() for most of the wait time to reduce CPU usage,
    then switches to a busy-loop for the final portion to achieve
    precise timing without OS scheduling jitter.
    """

    def __init__(self, interval_s: float, busy_threshold_s: float | None = None):
        """Initialize the loop timer.

        Args:
            interval_s: Target loop interval in seconds.
            busy_threshold_s: Time before deadline to switch from sleep to busy-loop.
                             Default from AXIS_PROFILE_BUSY_THRESHOLD_MS env var (2ms).
        """
        if not interval_s > 0:
            raise ValueError(f"interval_s must be positive, got {interval_s!r}")
        self._interval = float(interval_s)
        self._busy_threshold = (
            busy_threshold_s
            if busy_threshold_s is not None
            else cfg.BUSY_THRESHOLD_MS / 1000.0
        )
        self._next_deadline = 0.0
        self.loop_count = 0
        self.overrun_count = 0

    @property
    def interval(self) -> float:
        """Target loop interval in seconds."""
        return self._interval

    def start(self) -> None:
        """Initialize timing at loop start. Call once before entering the loop."""
        self._next_deadline = time.perf_counter()
        self.loop_count = 0
        self.overrun_count = 0

    def wait_for_next_tick(self) -> None:
        """Wait until the next deadline. Call at the end of each loop iteration."""
        self.loop_count += 1
        self._next_deadline += self._interval

        if self._next_deadline - time.perf_counter() > 0:
            sleep_until(self._next_deadline, self._busy_threshold)
        else:
            # Overrun - reset deadline to avoid perpetual catch-up
            self.overrun_count += 1
            self._next_deadline = time.perf_counter()
            logger.debug(
                "Loop overrun #%d (interval %.4fs)", self.overrun_count, self._interval
            )
