import typing as t

import rrtsim.world.field as f
from rrtsim.data_models import Point2D
from rrtsim.exceptions import InvalidConfiguration
from rrtsim.utils import utils
from rrtsim.world.obstacle import Obstacle


class CollisionChecker:
    """Point and segment tests against an obstacle field.

    The robot is modelled as a disc of radius `inflation_radius`: obstacles are grown and
    the workspace is shrunk by that radius so that every test below is a point/segment test.
    Obstacle boundaries count as collisions, the workspace edge does not; both up to
    `tolerance`. Start and goal must additionally lie strictly inside the workspace.
    """

    def __init__(
        self,
        field: "f.ObstacleField",
        inflation_radius: float = 0.0,
        tolerance: float = utils.EPSILON,
    ):
        if inflation_radius < 0:
            raise InvalidConfiguration(
                f"robot radius must not be negative, got {inflation_radius}"
            )
        if 2 * inflation_radius >= min(field.width, field.height):
            raise InvalidConfiguration(
                f"robot radius {inflation_radius} leaves no free space in a "
                f"{field.width}x{field.height} workspace"
            )
        self.field = field
        self.inflation_radius = inflation_radius
        self.tolerance = tolerance
        self.obstacles: t.List[Obstacle] = [
            o.inflate(inflation_radius) for o in field.obstacles
        ]

    def is_out_of_bounds(self, p: Point2D) -> bool:
        """Whether the point lies outside the (closed) workspace shrunk by the robot radius."""
        margin = self.inflation_radius - self.tolerance
        return not self.field.contains(p, margin=margin)

    def is_strictly_inside(self, p: Point2D) -> bool:
        margin = self.inflation_radius + self.tolerance
        return (
            margin < p[0] < self.field.width - margin
            and margin < p[1] < self.field.height - margin
        )

    def colliding_obstacles(self, p: Point2D, break_at_first: bool = False) -> t.Set[str]:
        """Returns the ids of the obstacles the point lies on or inside."""
        collides_with: t.Set[str] = set()
        for obstacle in self.obstacles:
            if obstacle.contains_point(p, self.tolerance):
                collides_with.add(obstacle.uid)
                if break_at_first:
                    break
        return collides_with

    def segment_colliding_obstacles(
        self, a: Point2D, b: Point2D, break_at_first: bool = False
    ) -> t.Set[str]:
        collides_with: t.Set[str] = set()
        for obstacle in self.obstacles:
            if obstacle.intersects_segment(a, b, self.tolerance):
                collides_with.add(obstacle.uid)
                if break_at_first:
                    break
        return collides_with

    def point_in_obstacle(self, p: Point2D) -> bool:
        if self.is_out_of_bounds(p):
            return True
        return len(self.colliding_obstacles(p, break_at_first=True)) > 0

    def segment_collides(self, a: Point2D, b: Point2D) -> bool:
        if utils.euclidean_distance(a, b) <= self.tolerance:
            return self.point_in_obstacle(a)

        # The workspace is convex: the segment stays inside iff both ends do.
        if self.is_out_of_bounds(a) or self.is_out_of_bounds(b):
            return True
        return len(self.segment_colliding_obstacles(a, b, break_at_first=True)) > 0

    def path_is_collision_free(self, points: t.Sequence[Point2D]) -> bool:
        if len(points) == 1:
            return not self.point_in_obstacle(points[0])
        return not any(
            self.segment_collides(a, b) for a, b in zip(points[:-1], points[1:])
        )

    def validate_endpoints(self, start: Point2D, goal: Point2D):
        """Raises `InvalidConfiguration` unless both points are strictly inside the
        workspace and strictly outside every obstacle."""
        for name, point in (("start", start), ("goal", goal)):
            if not self.is_strictly_inside(point):
                raise InvalidConfiguration(
                    f"{name} point {tuple(point)} is outside the workspace bounds "
                    f"(0, 0)-({self.field.width}, {self.field.height})"
                )
            collisions = self.colliding_obstacles(point)
            if collisions:
                raise InvalidConfiguration(
                    f"{name} point {tuple(point)} lies inside obstacle(s) "
                    f"{sorted(collisions)}"
                )
