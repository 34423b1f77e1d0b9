"""
Fixed-rate setpoint driver for a motion profile.

The follower owns the profile clock: it starts a Timer when a profile is
adopted and samples the profile at the elapsed time once per control period,
handing each setpoint to a closed-loop controller callback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from axis_profile.config import HISTORY_SECONDS, INTERVAL_S, TRACE_ENABLED
from axis_profile.motion.profile import MotionProfile, ProfileState
from axis_profile.utils.history import History
from axis_profile.utils.timing import LoopTimer, Timer

logger = logging.getLogger(__name__)


class ProfileFollower:
    """
    Samples one profile at a time against a monotonic timer.

    Commanding a new goal means planning a new profile and passing it to
    start(); the old profile is dropped and the clock restarts at zero.
    """

    def __init__(
        self,
        history_seconds: float = HISTORY_SECONDS,
        interval_s: float = INTERVAL_S,
    ):
        self.interval_s = interval_s
        self.profile: MotionProfile | None = None
        self._timer = Timer()
        capacity = max(1, int(round(history_seconds / interval_s)))
        self.position_history = History(capacity, interval_s)

    def start(self, profile: MotionProfile) -> None:
        """Adopt a profile and restart the clock."""
        self.profile = profile
        self.position_history.reset()
        self._timer.start()
        logger.info("Following new profile (%.3fs): %r", profile.total_time(), profile)

    def _require_profile(self) -> MotionProfile:
        if self.profile is None:
            raise RuntimeError("ProfileFollower has no profile; call start() first")
        return self.profile

    def elapsed(self) -> float:
        return self._timer.get()

    def setpoint(self) -> ProfileState:
        """Setpoint for the current elapsed time. Recorded in position_history."""
        profile = self._require_profile()
        t = self._timer.get()
        state = profile.calculate(t)
        self.position_history.update(state.position)
        if TRACE_ENABLED:
            logger.trace(  # type: ignore[attr-defined]
                "t=%.4f pos=%.6f vel=%.6f", t, state.position, state.velocity
            )
        return state

    def finished(self) -> bool:
        return self._require_profile().is_finished(self._timer.get())

    def run(
        self,
        on_setpoint: Callable[[ProfileState], None],
        timeout_s: float | None = None,
    ) -> int:
        """
        Deliver setpoints at the control rate until the profile finishes.

        The setpoint taken once the profile has finished is the goal state and is
        always delivered last.

        Args:
            on_setpoint: Called with each setpoint (e.g. a PID/feedforward update)
            timeout_s: Stop early after this many seconds of elapsed time

        Returns:
            Number of setpoints delivered
        """
        self._require_profile()
        loop = LoopTimer(self.interval_s)
        loop.start()
        delivered = 0
        while True:
            done = self.finished()
            on_setpoint(self.setpoint())
            delivered += 1
            if done:
                break
            if timeout_s is not None and self.elapsed() >= timeout_s:
                logger.warning(
                    "Profile run stopped by timeout after %.3fs (%d setpoints)",
                    timeout_s,
                    delivered,
                )
                break
            loop.wait_for_next_tick()
        if loop.overrun_count:
            logger.debug("Profile run had %d loop overruns", loop.overrun_count)
        return delivered
