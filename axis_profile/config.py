"""
Central configuration for axis_profile tunables and shared constants.
"""

from __future__ import annotations

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("AXIS_PROFILE_TRACE", "0")).lower() in (
    "1",
    "true",
    "yes",
    "on",
)

logger = logging.getLogger(__name__)

# Default control/sample rate (Hz)
CONTROL_RATE_HZ: float = float(os.getenv("AXIS_PROFILE_CONTROL_RATE_HZ", "200"))

# Centralized loop interval (seconds).
INTERVAL_S: float = max(1e-6, 1.0 / max(CONTROL_RATE_HZ, 1.0))

# Time before a deadline at which sleeping hands over to a busy-loop (ms)
BUSY_THRESHOLD_MS: float = float(os.getenv("AXIS_PROFILE_BUSY_THRESHOLD_MS", "2"))

# Default span of setpoint history kept by a follower (seconds)
HISTORY_SECONDS: float = float(os.getenv("AXIS_PROFILE_HISTORY_S", "5"))
