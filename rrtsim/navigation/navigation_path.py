import typing as t

import numpy as np

from rrtsim.algorithms.rrt_tree import RRTTree
from rrtsim.data_models import Point2D
from rrtsim.utils import utils


class Path:
    """
    An immutable, ordered sequence of waypoints. The first point is the start, the last
    one the goal (or the goal-adjacent tree node).
    """

    def __init__(self, points: t.Iterable[t.Sequence[float]]):
        self._points: t.Tuple[Point2D, ...] = tuple(
            Point2D(float(p[0]), float(p[1])) for p in points
        )
        self._cumulative: np.ndarray | None = None

    @property
    def points(self) -> t.Tuple[Point2D, ...]:
        return self._points

    @property
    def start(self) -> Point2D:
        return self._points[0]

    @property
    def end(self) -> Point2D:
        return self._points[-1]

    def cumulative_lengths(self) -> np.ndarray:
        if self._cumulative is None:
            self._cumulative = utils.cumulative_distances(self._points)
            self._cumulative.setflags(write=False)
        return self._cumulative

    def length(self) -> float:
        if len(self._points) < 2:
            return 0.0
        return float(self.cumulative_lengths()[-1])

    def interpolate(self, distance: float) -> Point2D:
        """Point reached after travelling `distance` along the path, clamped to its ends."""
        if len(self._points) == 0:
            raise ValueError("Cannot interpolate an empty path")
        if len(self._points) == 1:
            return self._points[0]
        cumulative = self.cumulative_lengths()
        xs = [p.x for p in self._points]
        ys = [p.y for p in self._points]
        distance = utils.clamp(distance, 0.0, float(cumulative[-1]))
        return Point2D(
            float(np.interp(distance, cumulative, xs)),
            float(np.interp(distance, cumulative, ys)),
        )

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, index: int) -> Point2D:
        return self._points[index]

    def __eq__(self, other: t.Any):
        if isinstance(other, Path):
            return self._points == other._points
        return NotImplemented

    def __hash__(self):
        return hash(self._points)

    def __repr__(self):
        return f"Path({list(self._points)})"


def extract_path(tree: RRTTree, node_index: int) -> Path:
    """Walks parent links from `node_index` back to the root and returns the points in
    root-to-node order."""
    node = tree.node(node_index)
    points = [node.point]
    while node.parent is not None:
        node = tree.node(node.parent)
        points.append(node.point)
    return Path(reversed(points))
