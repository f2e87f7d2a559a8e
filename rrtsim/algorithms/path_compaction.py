import typing as t

from rrtsim.data_models import CompactionStrategy, Point2D
from rrtsim.navigation.navigation_path import Path
from rrtsim.utils.collision import CollisionChecker


def compact_farthest_first(
    checker: CollisionChecker, points: t.Sequence[Point2D]
) -> t.List[Point2D]:
    """From the last accepted waypoint, jumps to the farthest waypoint (by path index)
    it can reach in a straight collision-free line."""
    n = len(points)
    compacted = [points[0]]
    i = 0
    while i < n - 1:
        next_index = i + 1
        for j in range(n - 1, i + 1, -1):
            if not checker.segment_collides(points[i], points[j]):
                next_index = j
                break
        # When no shortcut is free, the raw edge (i, i + 1) is kept.
        compacted.append(points[next_index])
        i = next_index
    return compacted


def compact_forward_scan(
    checker: CollisionChecker, points: t.Sequence[Point2D]
) -> t.List[Point2D]:
    """Extends the current shortcut one waypoint at a time and commits the previous
    waypoint as soon as the next one is no longer reachable."""
    n = len(points)
    compacted = [points[0]]
    for j in range(2, n):
        if checker.segment_collides(compacted[-1], points[j]):
            compacted.append(points[j - 1])
    compacted.append(points[n - 1])
    return compacted


def compact_path(
    checker: CollisionChecker,
    path: Path,
    strategy: CompactionStrategy = CompactionStrategy.FARTHEST_FIRST,
) -> Path:
    """Removes redundant waypoints by shortcutting. The result keeps the same end points,
    never has more points and is never longer than `path`."""
    if len(path) <= 2:
        return path

    points = path.points
    if strategy == CompactionStrategy.FARTHEST_FIRST:
        return Path(compact_farthest_first(checker, points))
    if strategy == CompactionStrategy.FORWARD_SCAN:
        return Path(compact_forward_scan(checker, points))
    raise ValueError(f"Unknown compaction strategy {strategy}")
