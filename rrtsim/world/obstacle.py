import math
import typing as t

from shapely.geometry import LineString, Point, Polygon, box
from typing_extensions import Self

from rrtsim.data_models import (
    ObstacleYamlConfig,
    Point2D,
    PolygonObstacleModel,
    RectangleObstacleModel,
    VertexModel,
)
from rrtsim.exceptions import InvalidConfiguration
from rrtsim.utils.utils import EPSILON

BUFFER_QUAD_SEGS = 16


class BaseObstacle:
    """A closed planar shape. Points on the boundary count as part of the obstacle."""

    def __init__(self, uid: str, polygon: Polygon):
        if polygon.is_empty or not polygon.is_valid:
            raise InvalidConfiguration(f"Obstacle {uid} is not a valid closed shape")
        self.uid = uid
        self.polygon = polygon

    def contains_point(self, point: Point2D, tolerance: float = EPSILON) -> bool:
        return self.polygon.distance(Point(point[0], point[1])) <= tolerance

    def intersects_segment(
        self, a: Point2D, b: Point2D, tolerance: float = EPSILON
    ) -> bool:
        return self.polygon.distance(LineString([a, b])) <= tolerance

    def inflate(self, radius: float) -> "Obstacle":
        """Returns the obstacle grown by `radius` in every direction, i.e. the set of
        positions at which a disc of that radius would touch it.

        shapely approximates the rounded corners with chords whose vertices lie on the
        buffer distance, so the distance is scaled up until the chords themselves stay
        `radius` away from the original shape. Straight edges are then pushed out
        about 0.1% further than `radius`.
        """
        if radius <= 0:
            return self
        distance = radius / math.cos(math.pi / (4 * BUFFER_QUAD_SEGS))
        return PolygonObstacle.from_polygon(
            self.uid, self.polygon.buffer(distance, quad_segs=BUFFER_QUAD_SEGS)
        )

    @property
    def bounds(self) -> t.Tuple[float, float, float, float]:
        return self.polygon.bounds


class RectangleObstacle(BaseObstacle):
    """Axis-aligned rectangle given by its min and max corners."""

    def __init__(self, uid: str, min_corner: VertexModel, max_corner: VertexModel):
        if min_corner[0] >= max_corner[0] or min_corner[1] >= max_corner[1]:
            raise InvalidConfiguration(
                f"Rectangle obstacle {uid} has an empty extent: {min_corner} -> {max_corner}"
            )
        BaseObstacle.__init__(
            self,
            uid=uid,
            polygon=box(min_corner[0], min_corner[1], max_corner[0], max_corner[1]),
        )
        self.min_corner = min_corner
        self.max_corner = max_corner

    def contains_point(self, point: Point2D, tolerance: float = EPSILON) -> bool:
        return (
            self.min_corner[0] - tolerance <= point[0] <= self.max_corner[0] + tolerance
            and self.min_corner[1] - tolerance
            <= point[1]
            <= self.max_corner[1] + tolerance
        )

    def __repr__(self):
        return f"RectangleObstacle({self.uid}, {self.min_corner}, {self.max_corner})"


class PolygonObstacle(BaseObstacle):
    def __init__(self, uid: str, vertices: t.Sequence[VertexModel]):
        if len(vertices) < 3:
            raise InvalidConfiguration(
                f"Polygon obstacle {uid} needs at least 3 vertices, got {len(vertices)}"
            )
        BaseObstacle.__init__(self, uid=uid, polygon=Polygon(vertices))

    @classmethod
    def from_polygon(cls, uid: str, polygon: Polygon) -> Self:
        return cls(uid, list(polygon.exterior.coords)[:-1])

    def __repr__(self):
        n_vertices = len(self.polygon.exterior.coords) - 1
        return f"PolygonObstacle({self.uid}, {n_vertices} vertices)"


Obstacle = t.Union[RectangleObstacle, PolygonObstacle]


def obstacle_from_config(config: ObstacleYamlConfig, index: int) -> Obstacle:
    uid = config.id or f"obstacle_{index}"
    if isinstance(config, RectangleObstacleModel):
        return RectangleObstacle(uid, min_corner=config.min, max_corner=config.max)
    if isinstance(config, PolygonObstacleModel):
        return PolygonObstacle(uid, vertices=config.vertices)
    raise InvalidConfiguration(f"Unknown obstacle type for {uid}")
