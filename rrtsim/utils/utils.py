import json
import logging
import math
import typing as t
from datetime import datetime

import numpy as np
import numpy.typing as npt

from rrtsim.data_models import Point2D

# Constants
TWO_PI = 2.0 * math.pi
EPSILON = 1e-9


def timestamp_string():
    return datetime.now().strftime("%Y-%m-%d-%Hh%Mm%Ss_%f")


class SimLog:
    def __init__(self, message: str, step: int, timestamp: str | None = None):
        self.message = message
        self.step = step
        self.timestamp = timestamp if timestamp is not None else timestamp_string()

    def __str__(self):
        return "At step {}: '{}'".format(self.step, self.message)

    def toJSON(self):
        return json.dumps(self, default=lambda o: o.__dict__, sort_keys=True, indent=4)


class SimLogger(list[SimLog]):
    def __init__(
        self, printout: bool = True, python_logger: logging.Logger | None = None
    ):
        super(SimLogger, self).__init__()
        self.printout = printout
        self.python_logger = python_logger

    def append(self, log: SimLog):
        super(SimLogger, self).append(log)
        if self.printout:
            print(log)
        if self.python_logger:
            self.python_logger.info(f"[rrtsim]:[step={log.step}]: {log.message}")

    def messages(self) -> t.List[str]:
        return [log.message for log in self]


def euclidean_distance(a: t.Sequence[float], b: t.Sequence[float]) -> float:
    return math.sqrt((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2)


def sum_of_euclidean_distances(points: t.Sequence[t.Sequence[float]]) -> float:
    if len(points) < 2:
        return 0.0

    total = 0.0
    prev_point = points[0]
    for cur_point in points[1:]:
        total += euclidean_distance(prev_point, cur_point)
        prev_point = cur_point

    return total


def normalize_angle_radians(radians: float) -> float:
    """Normalize angle to (-pi, pi]"""
    angle = math.atan2(math.sin(radians), math.cos(radians))
    if angle <= -math.pi:
        angle += TWO_PI
    return angle


def bearing(a: t.Sequence[float], b: t.Sequence[float]) -> float:
    """Direction (radians) of the vector from `a` to `b`."""
    return math.atan2(b[1] - a[1], b[0] - a[0])


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def advance_towards(a: Point2D, b: Point2D, distance: float) -> Point2D:
    """Returns the point `distance` away from `a` along the direction to `b`.
    If `b` is closer than `distance`, `b` itself is returned."""
    d = euclidean_distance(a, b)
    if d <= distance:
        return Point2D(b[0], b[1])
    ratio = distance / d
    return Point2D(a[0] + (b[0] - a[0]) * ratio, a[1] + (b[1] - a[1]) * ratio)


def cumulative_distances(
    points: t.Sequence[t.Sequence[float]],
) -> npt.NDArray[np.float64]:
    """Distance travelled along the polyline up to each of its points."""
    if len(points) == 0:
        return np.zeros(0)
    coords = np.asarray(points, dtype=np.float64)
    segment_lengths = np.hypot(*np.diff(coords, axis=0).T)
    return np.concatenate(([0.0], np.cumsum(segment_lengths)))
