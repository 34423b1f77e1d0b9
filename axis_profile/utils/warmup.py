"""
JIT warmup utilities.

Call warmup_jit() on startup to pre-compile all numba functions before the control loop.
With cache=True, this is fast if the cache exists, slower on first run.
"""

import logging
import time

import numpy as np

from axis_profile.motion.trapezoid import _trapezoid_sample_jit, _trapezoid_state_jit

logger = logging.getLogger(__name__)


def warmup_jit() -> float:
    """Compile every numba kernel with representative arguments.

    Returns:
        Seconds spent compiling (or loading from cache).
    """
    start = time.perf_counter()

    args = (0.0, 0.0, 1.0, 0.0, 1.0, 1.0, -1.0, 1.0, 1.0, 2.0)
    _trapezoid_state_jit(0.5, *args)

    times = np.linspace(0.0, 2.0, 8)
    pos = np.zeros(8, dtype=np.float64)
    vel = np.zeros(8, dtype=np.float64)
    _trapezoid_sample_jit(times, 1.0, *args, pos, vel)

    elapsed = time.perf_counter() - start
    logger.info("JIT warmup completed in %.3fs", elapsed)
    return elapsed
