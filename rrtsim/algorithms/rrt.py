import time
import typing as t

import numpy as np

from rrtsim.algorithms.kd_tree import KDTree
from rrtsim.algorithms.rrt_tree import RRTTree
from rrtsim.data_models import Point2D, RRTParametersModel
from rrtsim.exceptions import require_in_range, require_positive
from rrtsim.utils import utils
from rrtsim.utils.collision import CollisionChecker

CancelCheck = t.Callable[[RRTTree, int], bool]
"""Called with the tree and the current iteration, returns `True` to abort the search."""


def never_cancel(tree: RRTTree, iteration: int) -> bool:
    return False


def time_budget(seconds: float) -> CancelCheck:
    """Builds a cancel check that trips once `seconds` of wall-clock time have passed
    since its creation."""
    deadline = time.monotonic() + seconds

    def _check(tree: RRTTree, iteration: int) -> bool:
        return time.monotonic() >= deadline

    return _check


def validate_parameters(
    step_size: float, goal_tolerance: float, goal_bias: float, max_iterations: int
) -> None:
    """Raises `InvalidConfiguration` for planner parameters outside their domain."""
    require_positive("step_size", step_size)
    require_positive("goal_tolerance", goal_tolerance)
    require_in_range("goal_bias", goal_bias, 0.0, 1.0)
    require_positive("max_iterations", max_iterations)


class PlanningResult:
    outcome: t.ClassVar[str] = ""

    def __init__(self, tree: RRTTree, iterations: int, elapsed_time: float = 0.0):
        self.tree = tree
        self.iterations = iterations
        self.elapsed_time = elapsed_time


class PlanningSuccess(PlanningResult):
    outcome = "found"

    def __init__(
        self,
        tree: RRTTree,
        goal_node_index: int,
        iterations: int,
        elapsed_time: float = 0.0,
    ):
        super().__init__(tree, iterations, elapsed_time)
        self.goal_node_index = goal_node_index

    def __str__(self):
        return "Path found after {} iterations ({} tree nodes)".format(
            self.iterations, len(self.tree)
        )


class PlanningFailure(PlanningResult):
    pass


class PlanningNotFound(PlanningFailure):
    outcome = "not_found"

    def __str__(self):
        return "No path found within {} iterations ({} tree nodes)".format(
            self.iterations, len(self.tree)
        )


class PlanningCancelled(PlanningFailure):
    outcome = "cancelled"

    def __str__(self):
        return "Planning cancelled after {} iterations".format(self.iterations)


class RRTPlanner:
    """Grows a Rapidly-exploring Random Tree from `start` until a node lands within
    `goal_tolerance` of `goal` or the iteration budget runs out.

    All randomness comes from `rng`, so two planners built with equal inputs and
    equally seeded generators produce identical trees.
    """

    def __init__(
        self,
        checker: CollisionChecker,
        start: Point2D,
        goal: Point2D,
        *,
        step_size: float,
        goal_tolerance: float,
        goal_bias: float = 0.05,
        max_iterations: int = 5000,
        rng: np.random.Generator | None = None,
        use_kd_tree: bool = False,
        cancel_check: CancelCheck = never_cancel,
        cancel_check_interval: int = 1,
    ):
        validate_parameters(step_size, goal_tolerance, goal_bias, max_iterations)
        require_positive("cancel_check_interval", cancel_check_interval)

        self.checker = checker
        self.start = Point2D(start[0], start[1])
        self.goal = Point2D(goal[0], goal[1])
        self.checker.validate_endpoints(self.start, self.goal)

        self.step_size = step_size
        self.goal_tolerance = goal_tolerance
        self.goal_bias = goal_bias
        self.max_iterations = int(max_iterations)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.use_kd_tree = use_kd_tree
        self.cancel_check = cancel_check
        self.cancel_check_interval = cancel_check_interval

        self.tree: RRTTree = RRTTree(self.start)
        self._kdtree: KDTree | None = None
        self.rejected = 0

    @classmethod
    def from_parameters(
        cls,
        checker: CollisionChecker,
        start: Point2D,
        goal: Point2D,
        parameters: RRTParametersModel,
        seed: int | None = None,
        cancel_check: CancelCheck = never_cancel,
    ) -> "RRTPlanner":
        return cls(
            checker,
            start,
            goal,
            step_size=parameters.step_size,
            goal_tolerance=parameters.goal_tolerance,
            goal_bias=parameters.goal_bias,
            max_iterations=parameters.max_iterations,
            rng=np.random.default_rng(
                parameters.random_seed if seed is None else seed
            ),
            use_kd_tree=parameters.use_kd_tree,
            cancel_check=cancel_check,
        )

    def sample(self) -> Point2D:
        if self.rng.random() < self.goal_bias:
            return self.goal
        min_x, min_y, max_x, max_y = self.checker.field.sample_bounds()
        return Point2D(
            float(self.rng.uniform(min_x, max_x)),
            float(self.rng.uniform(min_y, max_y)),
        )

    def nearest_node(self, point: Point2D) -> int:
        if self._kdtree is not None:
            return self._kdtree.query(point, k=1)[0]
        return self.tree.nearest(point)

    def steer(self, from_point: Point2D, target: Point2D) -> Point2D:
        return utils.advance_towards(from_point, target, self.step_size)

    def near_goal(self, point: Point2D) -> bool:
        return utils.euclidean_distance(point, self.goal) <= self.goal_tolerance

    def add_new_node(self, point: Point2D, parent: int) -> int:
        index = self.tree.add(point, parent)
        if self._kdtree is not None:
            self._kdtree.add(index, point)
        return index

    def plan(self) -> PlanningResult:
        """Runs a single planning attempt on a fresh tree."""
        t0 = time.monotonic()
        self.tree = RRTTree(self.start)
        self.rejected = 0
        if self.use_kd_tree:
            self._kdtree = KDTree(dimensions=2)
            self._kdtree.add(0, self.start)

        if self.near_goal(self.start):
            return PlanningSuccess(self.tree, 0, 0, time.monotonic() - t0)

        for i in range(1, self.max_iterations + 1):
            if (i - 1) % self.cancel_check_interval == 0 and self.cancel_check(
                self.tree, i
            ):
                return PlanningCancelled(self.tree, i - 1, time.monotonic() - t0)

            candidate = self.sample()
            nearest = self.nearest_node(candidate)
            nearest_point = self.tree.node(nearest).point
            new_point = self.steer(nearest_point, candidate)

            if self.checker.segment_collides(nearest_point, new_point):
                self.rejected += 1
                continue

            new_index = self.add_new_node(new_point, nearest)
            if self.near_goal(new_point):
                return PlanningSuccess(self.tree, new_index, i, time.monotonic() - t0)

        return PlanningNotFound(self.tree, self.max_iterations, time.monotonic() - t0)
