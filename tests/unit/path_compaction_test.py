import numpy as np
import pytest

from rrtsim.algorithms.path_compaction import compact_path
from rrtsim.algorithms.rrt import PlanningSuccess, RRTPlanner
from rrtsim.data_models import CompactionStrategy, Point2D
from rrtsim.navigation.navigation_path import Path, extract_path
from rrtsim.utils.collision import CollisionChecker
from rrtsim.world.field import ObstacleField
from rrtsim.world.obstacle import RectangleObstacle


STRATEGIES = [CompactionStrategy.FARTHEST_FIRST, CompactionStrategy.FORWARD_SCAN]


def assert_valid_compaction(checker: CollisionChecker, raw: Path, compacted: Path):
    assert compacted.start == raw.start
    assert compacted.end == raw.end
    assert len(compacted) <= len(raw)
    assert compacted.length() <= raw.length() + 1e-9
    assert checker.path_is_collision_free(compacted.points)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_collinear_points(strategy: CompactionStrategy):
    checker = CollisionChecker(ObstacleField(10, 10))
    raw = Path([(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)])
    assert compact_path(checker, raw, strategy) == Path([(0, 0), (4, 0)])


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_short_paths_are_unchanged(strategy: CompactionStrategy):
    checker = CollisionChecker(ObstacleField(10, 10))
    for raw in (Path([(1, 1)]), Path([(1, 1), (5, 5)])):
        assert compact_path(checker, raw, strategy) is raw


class TestCompactionAroundWall:
    def setup_method(self):
        self.field = ObstacleField(100, 100, [RectangleObstacle("wall", (40, 0), (60, 60))])
        self.checker = CollisionChecker(self.field)
        self.raw = Path(
            [(5, 50), (20, 70), (30, 75), (50, 80), (70, 75), (80, 70), (95, 50)]
        )

    def test_raw_path_is_valid(self):
        assert self.checker.path_is_collision_free(self.raw.points)

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_shortcut(self, strategy: CompactionStrategy):
        compacted = compact_path(self.checker, self.raw, strategy)
        assert compacted == Path([(5, 50), (70, 75), (95, 50)])
        assert_valid_compaction(self.checker, self.raw, compacted)

    def test_farthest_first_keeps_blocked_edges(self):
        # A zig-zag where no shortcut is free keeps every waypoint.
        field = ObstacleField(
            100,
            100,
            [
                RectangleObstacle("low", (20, 0), (30, 50)),
                RectangleObstacle("high", (50, 50), (60, 100)),
            ],
        )
        checker = CollisionChecker(field)
        raw = Path([(10, 10), (10, 90), (40, 90), (40, 10), (70, 10)])
        assert checker.path_is_collision_free(raw.points)
        assert compact_path(checker, raw) == Path(
            [(10, 10), (10, 90), (40, 90), (40, 10), (70, 10)]
        )

    @pytest.mark.parametrize("strategy", STRATEGIES)
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_planned_paths(self, strategy: CompactionStrategy, seed: int):
        planner = RRTPlanner(
            self.checker,
            Point2D(5, 50),
            Point2D(95, 50),
            step_size=5.0,
            goal_tolerance=3.0,
            goal_bias=0.1,
            max_iterations=20000,
            rng=np.random.default_rng(seed),
        )
        result = planner.plan()
        assert isinstance(result, PlanningSuccess)
        raw = extract_path(result.tree, result.goal_node_index)
        compacted = compact_path(self.checker, raw, strategy)
        assert_valid_compaction(self.checker, raw, compacted)
        assert len(compacted) < len(raw)
