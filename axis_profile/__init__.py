"""
axis_profile Python Package

Time-parameterized position/velocity setpoints for a single controlled axis
under velocity and acceleration limits.

Key components:
- TrapezoidalProfile: closed-form trapezoidal (or triangular) profile
- MotionConstraints: max velocity / max acceleration limits
- ProfileState: position + velocity pair returned by calculate()
- ProfileFollower: drives a profile at the control rate
- InvalidConstraints: raised for non-positive limits
"""

from ._version import __version__
from .motion import (
    MotionConstraints,
    MotionProfile,
    ProfileFollower,
    ProfileState,
    Timeline,
    TrapezoidalProfile,
)
from .utils.errors import InvalidConstraints

__all__ = [
    "__version__",
    "MotionConstraints",
    "MotionProfile",
    "ProfileFollower",
    "ProfileState",
    "Timeline",
    "TrapezoidalProfile",
    "InvalidConstraints",
]
