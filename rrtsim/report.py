import typing as t

from pydantic import BaseModel

from rrtsim.data_models import Point2D


class PlanningAttemptStats(BaseModel):
    seed: int
    outcome: t.Literal["found", "not_found", "cancelled"]
    iterations: int = 0
    tree_size: int = 0
    rejected_samples: int = 0
    planning_time: float = 0.0


class SimulationReport(BaseModel):
    attempts: t.List[PlanningAttemptStats] = []
    """One entry per planning attempt, in order."""

    path_found: bool = False

    raw_path: t.List[Point2D] = []
    raw_path_length: float = 0.0

    compacted_path: t.List[Point2D] = []
    compacted_path_length: float = 0.0

    ticks: int = 0
    """Number of follower ticks executed."""

    reached_goal: bool = False
    distance_traveled: float = 0.0
    final_pose: t.Tuple[float, float, float] | None = None

    def save(self, path: str):
        with open(path, "w") as f:
            f.write(self.model_dump_json(indent=4))
