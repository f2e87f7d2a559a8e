import math
import typing as t
from enum import Enum

import yaml
from pydantic import BaseModel, Field, ValidationError

from rrtsim.exceptions import InvalidConfiguration


class Point2D(t.NamedTuple):
    x: float
    y: float


VertexModel = t.Tuple[float, float]


class CompactionStrategy(str, Enum):
    FARTHEST_FIRST = "farthest_first"
    FORWARD_SCAN = "forward_scan"


class VelocityFalloff(str, Enum):
    LINEAR = "linear"
    STEP = "step"


class WorkspaceModel(BaseModel):
    width: float
    height: float


class RectangleObstacleModel(BaseModel):
    type: t.Literal["rectangle"] = "rectangle"
    id: t.Optional[str] = None
    min: VertexModel
    max: VertexModel


class PolygonObstacleModel(BaseModel):
    type: t.Literal["polygon"] = "polygon"
    id: t.Optional[str] = None
    vertices: t.List[VertexModel] = Field(min_length=3)


ObstacleYamlConfig = t.Annotated[
    t.Union[RectangleObstacleModel, PolygonObstacleModel],
    Field(discriminator="type"),
]


class RRTParametersModel(BaseModel):
    step_size: float = 10.0
    goal_tolerance: float = 5.0
    goal_bias: float = 0.05
    max_iterations: int = 5000
    random_seed: int = 10
    use_kd_tree: bool = False
    compaction: CompactionStrategy = CompactionStrategy.FARTHEST_FIRST
    max_attempts: int = 1


class FollowerParametersModel(BaseModel):
    tick_duration: float = 0.1
    max_linear_velocity: float = 2.0
    max_angular_velocity: float = 1.5
    linear_gain: float = 1.0
    angular_gain: float = 2.0
    heading_error_threshold: float = math.pi / 4
    """Heading error (radians) beyond which the robot turns in place."""

    velocity_falloff: VelocityFalloff = VelocityFalloff.LINEAR
    goal_tolerance: float = 0.5


class ScenarioYamlModel(BaseModel):
    workspace: WorkspaceModel
    obstacles: t.List[ObstacleYamlConfig] = []
    start: VertexModel
    goal: VertexModel
    robot_radius: float = 0.0
    initial_heading: float = 0.0
    planner: RRTParametersModel = Field(default_factory=RRTParametersModel)
    follower: FollowerParametersModel = Field(default_factory=FollowerParametersModel)
    max_ticks: int = 5000
    generate_report: bool = False


def scenario_from_yaml(file_path: str) -> ScenarioYamlModel:
    try:
        with open(file_path, "r") as stream:
            config = yaml.safe_load(stream)
    except OSError as e:
        raise InvalidConfiguration(f"Cannot read scenario file {file_path}: {e}") from e

    if not isinstance(config, dict):
        raise InvalidConfiguration(f"Scenario file {file_path} is not a YAML mapping")

    try:
        return ScenarioYamlModel(**config)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid scenario file {file_path}: {e}") from e
