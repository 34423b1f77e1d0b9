"""
Trapezoidal velocity profile for a single axis.

The profile is solved once, in closed form, at construction: an acceleration
ramp from the initial velocity to the cruise velocity, an optional constant
velocity segment, and a ramp from the cruise velocity to the goal velocity.
When the move is too short to reach max_velocity the cruise segment vanishes
and the peak velocity is solved from the distance instead (triangular case).

All timing math is done in a canonical frame where the profile runs "forward".
Profiles that need to run the other way are negated on the way in and negated
back on the way out.

Example:
    constraints = MotionConstraints(max_velocity=1.0, max_acceleration=2.0)
    profile = TrapezoidalProfile(constraints, goal=ProfileState(0.8, 0.0),
                                 initial=ProfileState(current_pos, current_vel))
    ...
    setpoint = profile.calculate(now - profile_start)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[import-untyped]
from numpy.typing import ArrayLike, NDArray

from axis_profile.motion.profile import MotionProfile, ProfileState
from axis_profile.utils.errors import InvalidConstraints

logger = logging.getLogger(__name__)


# =============================================================================
# Numba kernels (canonical frame)
# =============================================================================


@njit(cache=True)
def _trapezoid_state_jit(
    t: float,
    x0: float,
    v0: float,
    xg: float,
    vg: float,
    v_cruise: float,
    acc_up: float,
    acc_down: float,
    end_accel: float,
    end_cruise: float,
    end_decel: float,
) -> tuple[float, float]:
    """Position and velocity at time t in the canonical frame.

    Times outside [0, end_decel] hold the boundary state. The decel segment is
    integrated backwards from the goal so the goal is hit exactly.
    """
    if t <= 0.0:
        return x0, v0
    if t >= end_decel:
        return xg, vg
    if t <= end_accel:
        return x0 + (v0 + 0.5 * acc_up * t) * t, v0 + acc_up * t
    if t <= end_cruise:
        x_accel = x0 + (v0 + 0.5 * acc_up * end_accel) * end_accel
        return x_accel + v_cruise * (t - end_accel), v_cruise
    left = end_decel - t
    return xg - (vg - 0.5 * acc_down * left) * left, vg - acc_down * left


@njit(cache=True)
def _trapezoid_sample_jit(
    times: np.ndarray,
    direction: float,
    x0: float,
    v0: float,
    xg: float,
    vg: float,
    v_cruise: float,
    acc_up: float,
    acc_down: float,
    end_accel: float,
    end_cruise: float,
    end_decel: float,
    pos_out: np.ndarray,
    vel_out: np.ndarray,
) -> None:
    """Evaluate a 1-D array of times into pre-allocated output buffers."""
    for i in range(times.shape[0]):
        x, v = _trapezoid_state_jit(
            times[i],
            x0,
            v0,
            xg,
            vg,
            v_cruise,
            acc_up,
            acc_down,
            end_accel,
            end_cruise,
            end_decel,
        )
        pos_out[i] = direction * x
        vel_out[i] = direction * v


# =============================================================================
# Data types
# =============================================================================


@dataclass(frozen=True)
class MotionConstraints:
    """Velocity and acceleration limits, fixed for a profile's lifetime."""

    max_velocity: float
    max_acceleration: float

    def __post_init__(self) -> None:
        for name in ("max_velocity", "max_acceleration"):
            value = float(getattr(self, name))
            if not (math.isfinite(value) and value > 0.0):
                raise InvalidConstraints(
                    f"{name} must be finite and greater than zero, got {value!r}"
                )
            object.__setattr__(self, name, value)


@dataclass(frozen=True)
class Timeline:
    """
    Segment boundaries measured from profile start, in the canonical frame.

    Attributes:
        end_of_accel: End of the ramp from the initial velocity
        end_of_cruise: End of the constant-velocity segment
        end_of_decel: End of the ramp to the goal velocity (total time)
        cruise_velocity: Velocity held between end_of_accel and end_of_cruise
        is_triangular: True when max_velocity is never reached
    """

    end_of_accel: float
    end_of_cruise: float
    end_of_decel: float
    cruise_velocity: float
    is_triangular: bool


def _ramp(v_from: float, v_to: float, max_acceleration: float) -> tuple[float, float]:
    """Duration and distance of a full-acceleration ramp between two velocities."""
    dv = v_to - v_from
    if dv == 0.0:
        return 0.0, 0.0
    duration = abs(dv) / max_acceleration
    return duration, 0.5 * (v_from + v_to) * duration


def _should_flip(
    initial: ProfileState, goal: ProfileState, constraints: MotionConstraints
) -> bool:
    # Distance covered by a straight velocity ramp from initial to goal velocity.
    # If it already overshoots the requested displacement, invert the profile.
    velocity_change = goal.velocity - initial.velocity
    distance_change = goal.position - initial.position
    t = abs(velocity_change) / constraints.max_acceleration
    return t * (velocity_change / 2.0 + initial.velocity) > distance_change


def _solve_timeline(
    initial: ProfileState, goal: ProfileState, constraints: MotionConstraints
) -> Timeline:
    """Segment timing for a canonical (non-flipped) initial/goal pair."""
    v_max = constraints.max_velocity
    a_max = constraints.max_acceleration
    v0 = initial.velocity
    vg = goal.velocity
    distance = goal.position - initial.position

    accel_time, accel_dist = _ramp(v0, v_max, a_max)
    decel_time, decel_dist = _ramp(v_max, vg, a_max)
    cruise_dist = distance - accel_dist - decel_dist

    if cruise_dist >= 0.0:
        cruise_velocity = v_max
        cruise_time = cruise_dist / v_max if cruise_dist > 0.0 else 0.0
        triangular = False
    else:
        # Solve (v^2 - v0^2) / 2a + (v^2 - vg^2) / 2a = distance for v
        mean_sq = 0.5 * (v0 * v0 + vg * vg)
        if v0 > v_max and vg > v_max:
            # Both ends above the cap: the middle dips towards it instead
            cruise_velocity = math.sqrt(max(mean_sq - a_max * distance, 0.0))
        else:
            cruise_velocity = math.sqrt(max(mean_sq + a_max * distance, 0.0))
        accel_time, _ = _ramp(v0, cruise_velocity, a_max)
        decel_time, _ = _ramp(cruise_velocity, vg, a_max)
        cruise_time = 0.0
        triangular = True

    end_of_accel = accel_time
    end_of_cruise = end_of_accel + cruise_time
    return Timeline(
        end_of_accel=end_of_accel,
        end_of_cruise=end_of_cruise,
        end_of_decel=end_of_cruise + decel_time,
        cruise_velocity=cruise_velocity,
        is_triangular=triangular,
    )


# =============================================================================
# Profile
# =============================================================================


class TrapezoidalProfile(MotionProfile):
    """
    A trapezoidal-shaped velocity profile between two kinematic states.

    The instance is immutable: constraints, boundary states and the timeline are
    fixed at construction. Use retuned() to plan the same move with new limits.
    """

    __slots__ = (
        "_constraints",
        "_initial",
        "_goal",
        "_direction",
        "_timeline",
        "_kernel_args",
    )

    def __init__(
        self,
        constraints: MotionConstraints,
        goal: ProfileState,
        initial: ProfileState | None = None,
    ):
        """
        Plan a profile from initial to goal.

        Args:
            constraints: Velocity/acceleration limits
            goal: Target position and velocity
            initial: Starting position and velocity (default at rest at 0)

        Raises:
            InvalidConstraints: If either limit is not a finite value > 0
        """
        if not isinstance(constraints, MotionConstraints):
            constraints = MotionConstraints(
                constraints.max_velocity, constraints.max_acceleration
            )
        if initial is None:
            initial = ProfileState()
        self._constraints = constraints
        self._initial = ProfileState(float(initial.position), float(initial.velocity))
        self._goal = ProfileState(float(goal.position), float(goal.velocity))

        self._direction = -1 if _should_flip(self._initial, self._goal, constraints) else 1
        initial_c = self._direct(self._initial)
        goal_c = self._direct(self._goal)
        self._timeline = _solve_timeline(initial_c, goal_c, constraints)

        tl = self._timeline
        a_max = constraints.max_acceleration
        acc_up = a_max if tl.cruise_velocity >= initial_c.velocity else -a_max
        acc_down = a_max if goal_c.velocity >= tl.cruise_velocity else -a_max
        self._kernel_args = (
            initial_c.position,
            initial_c.velocity,
            goal_c.position,
            goal_c.velocity,
            tl.cruise_velocity,
            acc_up,
            acc_down,
            tl.end_of_accel,
            tl.end_of_cruise,
            tl.end_of_decel,
        )

        logger.debug(
            "Trapezoidal profile %s -> %s: accel %.4fs, cruise %.4fs, decel %.4fs "
            "(direction %+d, %s)",
            self._initial,
            self._goal,
            tl.end_of_accel,
            tl.end_of_cruise - tl.end_of_accel,
            tl.end_of_decel - tl.end_of_cruise,
            self._direction,
            "triangular" if tl.is_triangular else "trapezoidal",
        )

    def _direct(self, state: ProfileState) -> ProfileState:
        """Flip position and velocity signs if the profile is inverted."""
        if self._direction == 1:
            return state
        return ProfileState(-state.position, -state.velocity)

    def calculate(self, t: float) -> ProfileState:
        """
        Position and velocity at elapsed time t.

        Times before 0 hold the initial state and times after total_time()
        hold the goal state.
        """
        x, v = _trapezoid_state_jit(float(t), *self._kernel_args)
        return self._direct(ProfileState(x, v))

    def total_time(self) -> float:
        return self._timeline.end_of_decel

    def sample_many(
        self, times: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        t_arr = np.asarray(times, dtype=np.float64)
        flat = np.ascontiguousarray(t_arr.ravel())
        positions = np.empty_like(flat)
        velocities = np.empty_like(flat)
        _trapezoid_sample_jit(
            flat, float(self._direction), *self._kernel_args, positions, velocities
        )
        return positions.reshape(t_arr.shape), velocities.reshape(t_arr.shape)

    def retuned(self, constraints: MotionConstraints) -> TrapezoidalProfile:
        """Plan the same initial -> goal move under different limits."""
        return TrapezoidalProfile(constraints, self._goal, self._initial)

    @property
    def constraints(self) -> MotionConstraints:
        return self._constraints

    @property
    def initial(self) -> ProfileState:
        return self._initial

    @property
    def goal(self) -> ProfileState:
        return self._goal

    @property
    def direction(self) -> int:
        """1 for a forward profile, -1 for an inverted one."""
        return self._direction

    @property
    def timeline(self) -> Timeline:
        """Segment boundaries (velocities in the canonical frame)."""
        return self._timeline

    @property
    def peak_velocity(self) -> float:
        """Velocity held between accel and decel, in the caller's sign convention."""
        return self._direction * self._timeline.cruise_velocity

    @property
    def is_triangular(self) -> bool:
        return self._timeline.is_triangular

    def __repr__(self) -> str:
        return (
            f"TrapezoidalProfile(constraints={self._constraints!r}, "
            f"goal={self._goal!r}, initial={self._initial!r})"
        )
