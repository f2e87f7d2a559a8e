import heapq
import math
import typing as t


class KDNode:
    def __init__(self, index: int, point: t.Tuple[float, ...], axis: int):
        self.index = index  # Caller-side id of the point, e.g. an RRT node index
        self.point = point
        self.axis = axis
        self.left: t.Optional["KDNode"] = None
        self.right: t.Optional["KDNode"] = None


def euclidean(a: t.Sequence[float], b: t.Sequence[float]) -> float:
    return math.sqrt(sum((x - y) ** 2 for (x, y) in zip(a, b)))


class KDTree:
    """Incremental k-d tree over indexed points. Points are never removed.

    Among equidistant neighbours the lowest index wins, which matches the linear scan
    in `RRTTree.nearest`.
    """

    def __init__(self, dimensions: int = 2):
        self.root: t.Optional[KDNode] = None
        self.dimensions = dimensions
        self._size = 0

    def add(self, index: int, point: t.Sequence[float]) -> None:
        """Add a point to the KDTree under the given index."""
        coords = tuple(float(x) for x in point)
        if len(coords) != self.dimensions:
            raise ValueError("Point dimension does not match tree dimensions")

        new_node = KDNode(index, coords, 0)
        self._size += 1
        if self.root is None:
            self.root = new_node
            return

        node = self.root
        depth = 0
        while True:
            depth += 1
            if coords[node.axis] < node.point[node.axis]:
                if node.left is None:
                    new_node.axis = depth % self.dimensions
                    node.left = new_node
                    return
                node = node.left
            else:
                if node.right is None:
                    new_node.axis = depth % self.dimensions
                    node.right = new_node
                    return
                node = node.right

    def query(self, point: t.Sequence[float], k: int = 1) -> t.List[int]:
        """Indices of the k nearest points, closest first."""
        target = [float(x) for x in point]
        if len(target) != self.dimensions:
            raise ValueError("Query point dimension does not match tree dimensions")
        if k < 1:
            raise ValueError("k must be positive")

        # Max-heap on (distance, index) through negated keys
        nearest: t.List[t.Tuple[float, int]] = []

        def _worse_than_all(dist: float, index: int) -> bool:
            worst_dist, worst_index = -nearest[0][0], -nearest[0][1]
            return (dist, index) >= (worst_dist, worst_index)

        # Each entry carries the offset to the splitting plane that separates it from
        # the query point, zero for subtrees on the query side.
        stack: t.List[t.Tuple[KDNode, float]] = []
        if self.root is not None:
            stack.append((self.root, 0.0))
        while stack:
            node, plane_offset = stack.pop()
            if len(nearest) == k and plane_offset > -nearest[0][0]:
                continue

            dist = euclidean(target, node.point)
            if len(nearest) < k:
                heapq.heappush(nearest, (-dist, -node.index))
            elif not _worse_than_all(dist, node.index):
                heapq.heappushpop(nearest, (-dist, -node.index))

            diff = target[node.axis] - node.point[node.axis]
            near_subtree = node.left if diff < 0 else node.right
            far_subtree = node.right if diff < 0 else node.left
            # Pushed first so that the near side is searched first
            if far_subtree is not None:
                stack.append((far_subtree, max(plane_offset, abs(diff))))
            if near_subtree is not None:
                stack.append((near_subtree, plane_offset))

        return [-index for _, index in sorted(nearest, key=lambda x: (-x[0], -x[1]))]

    def __len__(self):
        return self._size
