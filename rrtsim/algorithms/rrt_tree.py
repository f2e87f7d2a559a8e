import typing as t
from dataclasses import dataclass

import numpy as np

from rrtsim.data_models import Point2D


@dataclass(frozen=True)
class TreeNode:
    point: Point2D
    parent: t.Optional[int] = None
    """Index of the parent node in the tree, `None` for the root."""


class RRTTree:
    """Append-only arena of tree nodes. Each node stores the index of its parent, and a
    new node may only point to an already existing one, so parent chains always end at
    the root (index 0)."""

    def __init__(self, root: Point2D, initial_capacity: int = 256):
        self._nodes: t.List[TreeNode] = [TreeNode(Point2D(root[0], root[1]))]
        self._coords = np.empty((max(1, initial_capacity), 2), dtype=np.float64)
        self._coords[0] = root

    def add(self, point: Point2D, parent: int) -> int:
        if not 0 <= parent < len(self._nodes):
            raise IndexError(f"Parent index {parent} is not in the tree")
        index = len(self._nodes)
        self._nodes.append(TreeNode(Point2D(point[0], point[1]), parent))
        if index >= len(self._coords):
            self._coords = np.concatenate((self._coords, np.empty_like(self._coords)))
        self._coords[index] = point
        return index

    def nearest(self, point: t.Sequence[float]) -> int:
        """Index of the node closest to `point`. Ties go to the lowest index."""
        coords = self._coords[: len(self._nodes)]
        d = np.hypot(coords[:, 0] - point[0], coords[:, 1] - point[1])
        return int(np.argmin(d))

    def node(self, index: int) -> TreeNode:
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"Node index {index} is not in the tree")
        return self._nodes[index]

    @property
    def root(self) -> TreeNode:
        return self._nodes[0]

    @property
    def points(self) -> t.List[Point2D]:
        return [n.point for n in self._nodes]

    @property
    def parents(self) -> t.List[t.Optional[int]]:
        return [n.parent for n in self._nodes]

    def edges(self) -> t.Iterator[t.Tuple[Point2D, Point2D]]:
        """Yields (parent point, child point) for every non-root node."""
        for n in self._nodes[1:]:
            assert n.parent is not None
            yield self._nodes[n.parent].point, n.point

    def depth(self, index: int) -> int:
        """Number of parent links from the node to the root."""
        steps = 0
        node = self.node(index)
        while node.parent is not None:
            node = self._nodes[node.parent]
            steps += 1
            if steps > len(self._nodes):
                raise RuntimeError(
                    f"Parent chain from node {index} does not reach the root"
                )
        return steps

    def __len__(self):
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)
