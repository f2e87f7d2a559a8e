import typing as t

from rrtsim.data_models import Point2D, ScenarioYamlModel
from rrtsim.exceptions import InvalidConfiguration, require_positive
from rrtsim.world.obstacle import Obstacle, obstacle_from_config


class ObstacleField:
    """The rectangular workspace `[0, width] x [0, height]` and the static obstacles in it.

    Obstacles are never mutated once the field is built. They may extend past the
    workspace bounds.
    """

    def __init__(
        self, width: float, height: float, obstacles: t.Iterable[Obstacle] = ()
    ):
        require_positive("workspace width", width)
        require_positive("workspace height", height)
        self.width = width
        self.height = height
        self._obstacles: t.Tuple[Obstacle, ...] = tuple(obstacles)

        uids = [o.uid for o in self._obstacles]
        if len(uids) != len(set(uids)):
            raise InvalidConfiguration(f"Duplicate obstacle ids in {uids}")

    @property
    def obstacles(self) -> t.Tuple[Obstacle, ...]:
        return self._obstacles

    def sample_bounds(self) -> t.Tuple[float, float, float, float]:
        return 0.0, 0.0, self.width, self.height

    def contains(self, point: Point2D, margin: float = 0.0) -> bool:
        """Whether the point lies inside the workspace shrunk by `margin` (boundary included)."""
        return (
            margin <= point[0] <= self.width - margin
            and margin <= point[1] <= self.height - margin
        )

    def get_obstacle(self, uid: str) -> Obstacle:
        for obstacle in self._obstacles:
            if obstacle.uid == uid:
                return obstacle
        raise KeyError(uid)

    @classmethod
    def from_config(cls, config: ScenarioYamlModel) -> "ObstacleField":
        return cls(
            width=config.workspace.width,
            height=config.workspace.height,
            obstacles=[
                obstacle_from_config(o, index) for index, o in enumerate(config.obstacles)
            ],
        )

    def __len__(self):
        return len(self._obstacles)
