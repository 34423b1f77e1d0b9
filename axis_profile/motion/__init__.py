"""
Single-axis motion profiles.

- MotionProfile / ProfileState: the shared calculate()/total_time() interface
- TrapezoidalProfile: velocity- and acceleration-limited trapezoidal profile
- ProfileFollower: samples a profile against a timer at the control rate
"""

from axis_profile.motion.follower import ProfileFollower
from axis_profile.motion.profile import MotionProfile, ProfileState
from axis_profile.motion.trapezoid import (
    MotionConstraints,
    Timeline,
    TrapezoidalProfile,
)

__all__ = [
    "MotionProfile",
    "ProfileState",
    "MotionConstraints",
    "Timeline",
    "TrapezoidalProfile",
    "ProfileFollower",
]
