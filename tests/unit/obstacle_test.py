import math

import pytest

from rrtsim.data_models import PolygonObstacleModel, RectangleObstacleModel
from rrtsim.exceptions import InvalidConfiguration
from rrtsim.world.field import ObstacleField
from rrtsim.world.obstacle import (
    PolygonObstacle,
    RectangleObstacle,
    obstacle_from_config,
)


class TestObstacle:
    def setup_method(self):
        self.simple_square = RectangleObstacle("simple_square", (-1, -1), (1, 1))
        self.triangle = PolygonObstacle("triangle", [(0, 0), (4, 0), (0, 4)])

    def test_rectangle_contains_point(self):
        assert self.simple_square.contains_point((0, 0))
        assert self.simple_square.contains_point((1, 1))
        assert not self.simple_square.contains_point((1.01, 0))

    def test_polygon_contains_point(self):
        assert self.triangle.contains_point((1, 1))
        assert self.triangle.contains_point((2, 2))
        assert not self.triangle.contains_point((2.1, 2.1))

    def test_intersects_segment(self):
        assert self.simple_square.intersects_segment((-5, 0), (5, 0))
        assert not self.simple_square.intersects_segment((-5, 2), (5, 2))
        assert self.triangle.intersects_segment((3, 3), (0, 1))
        assert not self.triangle.intersects_segment((3, 3), (5, 1.5))

    def test_inflate(self):
        inflated = self.simple_square.inflate(1.0)
        assert isinstance(inflated, PolygonObstacle)
        assert inflated.uid == "simple_square"
        assert inflated.bounds == pytest.approx((-2, -2, 2, 2), abs=0.01)
        assert self.simple_square.inflate(0.0) is self.simple_square
        assert self.triangle.inflate(0.5).contains_point((-0.4, 2))

    def test_inflated_corners_cover_radius(self):
        # Every point at exactly the inflation radius from a corner is inside
        inflated = self.simple_square.inflate(1.0)
        inflated_triangle = self.triangle.inflate(0.5)
        for step in range(91):
            angle = math.radians(step)
            assert inflated.contains_point(
                (1 + math.cos(angle), 1 + math.sin(angle)), tolerance=0.0
            )
            assert inflated_triangle.contains_point(
                (4 + 0.5 * math.cos(-angle), 0.5 * math.sin(-angle)), tolerance=0.0
            )
        # A corner stays rounded
        assert not inflated.contains_point((1.75, 1.75))

    def test_invalid_shapes(self):
        with pytest.raises(InvalidConfiguration):
            RectangleObstacle("flat", (0, 0), (1, 0))
        with pytest.raises(InvalidConfiguration):
            PolygonObstacle("segment", [(0, 0), (1, 1)])
        with pytest.raises(InvalidConfiguration):
            # Self-intersecting "bowtie"
            PolygonObstacle("bowtie", [(0, 0), (2, 2), (2, 0), (0, 2)])

    def test_from_config(self):
        rect = obstacle_from_config(
            RectangleObstacleModel(min=(1, 2), max=(3, 4)), index=3
        )
        assert isinstance(rect, RectangleObstacle)
        assert rect.uid == "obstacle_3"
        assert rect.bounds == (1, 2, 3, 4)

        poly = obstacle_from_config(
            PolygonObstacleModel(id="tri", vertices=[(0, 0), (1, 0), (0, 1)]), index=0
        )
        assert isinstance(poly, PolygonObstacle)
        assert poly.uid == "tri"


class TestObstacleField:
    def test_field(self):
        square = RectangleObstacle("square", (10, 10), (20, 20))
        field = ObstacleField(100, 50, [square])
        assert len(field) == 1
        assert field.get_obstacle("square") is square
        assert field.contains((100, 50))
        assert not field.contains((100, 51))
        assert not field.contains((1, 1), margin=2)
        with pytest.raises(KeyError):
            field.get_obstacle("other")

    def test_invalid_field(self):
        with pytest.raises(InvalidConfiguration):
            ObstacleField(0, 10)
        with pytest.raises(InvalidConfiguration):
            ObstacleField(10, -1)
        with pytest.raises(InvalidConfiguration, match="Duplicate"):
            ObstacleField(
                10,
                10,
                [
                    RectangleObstacle("a", (1, 1), (2, 2)),
                    RectangleObstacle("a", (3, 3), (4, 4)),
                ],
            )
