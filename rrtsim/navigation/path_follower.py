import math
import typing as t
from dataclasses import dataclass
from enum import Enum

from rrtsim.data_models import FollowerParametersModel, Point2D, VelocityFalloff
from rrtsim.exceptions import InvalidConfiguration, require_positive
from rrtsim.navigation.navigation_path import Path
from rrtsim.utils import utils


@dataclass
class RobotState:
    """Unicycle robot pose plus the velocities commanded on the last tick. `heading` is in
    radians, counter-clockwise from the x axis."""

    x: float
    y: float
    heading: float = 0.0
    linear_velocity: float = 0.0
    angular_velocity: float = 0.0

    @property
    def position(self) -> Point2D:
        return Point2D(self.x, self.y)

    def distance_to(self, point: t.Sequence[float]) -> float:
        return utils.euclidean_distance((self.x, self.y), point)


class FollowStatus(Enum):
    STILL_FOLLOWING = 1
    REACHED_GOAL = 2


@dataclass
class FollowResult:
    status: FollowStatus
    waypoint_index: int
    """Index of the waypoint to target on the next tick."""

    @property
    def reached_goal(self) -> bool:
        return self.status == FollowStatus.REACHED_GOAL


class FollowerParameters:
    def __init__(
        self,
        tick_duration: float = 0.1,
        max_linear_velocity: float = 2.0,
        max_angular_velocity: float = 1.5,
        linear_gain: float = 1.0,
        angular_gain: float = 2.0,
        heading_error_threshold: float = math.pi / 4,
        velocity_falloff: VelocityFalloff = VelocityFalloff.LINEAR,
        goal_tolerance: float = 0.5,
    ):
        require_positive("tick_duration", tick_duration)
        require_positive("max_linear_velocity", max_linear_velocity)
        require_positive("max_angular_velocity", max_angular_velocity)
        require_positive("linear_gain", linear_gain)
        require_positive("angular_gain", angular_gain)
        require_positive("goal_tolerance", goal_tolerance)
        if not 0 < heading_error_threshold <= math.pi:
            raise InvalidConfiguration(
                f"heading_error_threshold must lie in (0, pi], got {heading_error_threshold}"
            )
        self.tick_duration = tick_duration
        self.max_linear_velocity = max_linear_velocity
        self.max_angular_velocity = max_angular_velocity
        self.linear_gain = linear_gain
        self.angular_gain = angular_gain
        self.heading_error_threshold = heading_error_threshold
        self.velocity_falloff = velocity_falloff
        self.goal_tolerance = goal_tolerance

    @classmethod
    def from_config(cls, config: FollowerParametersModel) -> "FollowerParameters":
        return cls(**config.model_dump())


def heading_error(state: RobotState, target: t.Sequence[float]) -> float:
    """Signed angle (radians, in (-pi, pi]) the robot must turn to face `target`."""
    return utils.normalize_angle_radians(
        utils.bearing((state.x, state.y), target) - state.heading
    )


def alignment_factor(error: float, params: FollowerParameters) -> float:
    """Scales the linear velocity down as the heading error grows, reaching zero at the
    threshold so that the robot turns in place when badly misaligned."""
    ratio = abs(error) / params.heading_error_threshold
    if ratio >= 1.0:
        return 0.0
    if params.velocity_falloff == VelocityFalloff.STEP:
        return 1.0
    return 1.0 - ratio


def compute_commands(
    state: RobotState, target: t.Sequence[float], params: FollowerParameters
) -> t.Tuple[float, float]:
    """Returns the (linear, angular) velocity command for steering towards `target`."""
    error = heading_error(state, target)
    angular = utils.clamp(
        params.angular_gain * error,
        -params.max_angular_velocity,
        params.max_angular_velocity,
    )
    linear = utils.clamp(
        params.linear_gain * state.distance_to(target),
        0.0,
        params.max_linear_velocity,
    )
    return linear * alignment_factor(error, params), angular


def integrate(state: RobotState, linear: float, angular: float, dt: float) -> None:
    """Unicycle update: move along the current heading, then turn."""
    state.linear_velocity = linear
    state.angular_velocity = angular
    state.x += linear * math.cos(state.heading) * dt
    state.y += linear * math.sin(state.heading) * dt
    state.heading = utils.normalize_angle_radians(state.heading + angular * dt)


def _skip_reached_waypoints(
    state: RobotState, path: Path, waypoint_index: int, params: FollowerParameters
) -> int:
    while (
        waypoint_index < len(path)
        and state.distance_to(path[waypoint_index]) <= params.goal_tolerance
    ):
        waypoint_index += 1
    return waypoint_index


def follow_step(
    state: RobotState,
    path: Path,
    waypoint_index: int,
    params: FollowerParameters,
) -> FollowResult:
    """Advances `state` by one tick towards `path[waypoint_index]`.

    The path is trusted to be collision-free; obstacles are not checked here. The
    caller owns the waypoint index and feeds back the one returned in the result.
    """
    if len(path) == 0:
        raise ValueError("Cannot follow an empty path")
    if not 0 <= waypoint_index <= len(path):
        raise IndexError(f"Waypoint index {waypoint_index} is not in the path")

    waypoint_index = _skip_reached_waypoints(state, path, waypoint_index, params)
    if waypoint_index >= len(path):
        state.linear_velocity = 0.0
        state.angular_velocity = 0.0
        return FollowResult(FollowStatus.REACHED_GOAL, len(path))

    linear, angular = compute_commands(state, path[waypoint_index], params)
    integrate(state, linear, angular, params.tick_duration)

    waypoint_index = _skip_reached_waypoints(state, path, waypoint_index, params)
    if waypoint_index >= len(path):
        return FollowResult(FollowStatus.REACHED_GOAL, len(path))
    return FollowResult(FollowStatus.STILL_FOLLOWING, waypoint_index)


class PathFollower:
    """Convenience wrapper holding the path, the parameters and the current waypoint
    index for a driver that does not want to track them itself."""

    def __init__(self, path: Path, params: FollowerParameters):
        if len(path) == 0:
            raise ValueError("Cannot follow an empty path")
        self.path = path
        self.params = params
        self.waypoint_index = 0
        self.status = FollowStatus.STILL_FOLLOWING

    def step(self, state: RobotState) -> FollowResult:
        result = follow_step(state, self.path, self.waypoint_index, self.params)
        self.waypoint_index = result.waypoint_index
        self.status = result.status
        return result

    @property
    def current_target(self) -> Point2D | None:
        if self.waypoint_index >= len(self.path):
            return None
        return self.path[self.waypoint_index]
