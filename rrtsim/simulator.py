import copy
import os
import typing as t

from rrtsim.algorithms.path_compaction import compact_path
from rrtsim.algorithms.rrt import (
    CancelCheck,
    PlanningCancelled,
    PlanningResult,
    PlanningSuccess,
    RRTPlanner,
    never_cancel,
    validate_parameters,
)
from rrtsim.data_models import Point2D, ScenarioYamlModel, scenario_from_yaml
from rrtsim.exceptions import require_positive
from rrtsim.navigation.navigation_path import Path, extract_path
from rrtsim.navigation.path_follower import (
    FollowerParameters,
    FollowResult,
    FollowStatus,
    RobotState,
    follow_step,
)
from rrtsim.report import PlanningAttemptStats, SimulationReport
from rrtsim.utils import utils
from rrtsim.utils.collision import CollisionChecker
from rrtsim.world.field import ObstacleField


class Simulator:
    """Headless simulation driver. It plans once (retrying on failure), compacts the
    path, then advances the robot along it one fixed-duration tick at a time until the
    goal is reached or the tick budget runs out."""

    def __init__(
        self,
        *,
        scenario: ScenarioYamlModel,
        logger: utils.SimLogger,
        logs_dir: str | None = None,
        cancel_check: CancelCheck = never_cancel,
    ):
        self.scenario = scenario
        self.logger = logger
        self.logs_dir = logs_dir
        self.cancel_check = cancel_check

        require_positive("max_ticks", scenario.max_ticks)
        require_positive("max_attempts", scenario.planner.max_attempts)
        validate_parameters(
            step_size=scenario.planner.step_size,
            goal_tolerance=scenario.planner.goal_tolerance,
            goal_bias=scenario.planner.goal_bias,
            max_iterations=scenario.planner.max_iterations,
        )

        self.field = ObstacleField.from_config(scenario)
        self.checker = CollisionChecker(
            self.field, inflation_radius=scenario.robot_radius
        )
        self.start = Point2D(*scenario.start)
        self.goal = Point2D(*scenario.goal)
        self.checker.validate_endpoints(self.start, self.goal)
        self.follower_params = FollowerParameters.from_config(scenario.follower)
        self.logger.append(utils.SimLog("Scenario successfully loaded.", 0))

        self.robot = RobotState(
            x=self.start.x, y=self.start.y, heading=scenario.initial_heading
        )
        self.trajectory: t.List[RobotState] = [copy.copy(self.robot)]
        self.waypoint_index = 0
        self.status: FollowStatus | None = None

        self.planning_result: PlanningResult | None = None
        self.raw_path: Path | None = None
        self.compacted_path: Path | None = None
        self.report = SimulationReport()

    def plan(self) -> PlanningResult:
        """Runs planning attempts until one succeeds, is cancelled, or `max_attempts`
        is reached. Each retry uses the next seed."""
        params = self.scenario.planner
        result: PlanningResult | None = None
        for attempt in range(params.max_attempts):
            seed = params.random_seed + attempt
            planner = RRTPlanner.from_parameters(
                self.checker,
                self.start,
                self.goal,
                params,
                seed=seed,
                cancel_check=self.cancel_check,
            )
            result = planner.plan()
            self.logger.append(
                utils.SimLog(
                    f"Planning attempt {attempt + 1} (seed={seed}): {result}", 0
                )
            )
            self.report.attempts.append(
                PlanningAttemptStats(
                    seed=seed,
                    outcome=result.outcome,
                    iterations=result.iterations,
                    tree_size=len(result.tree),
                    rejected_samples=planner.rejected,
                    planning_time=result.elapsed_time,
                )
            )
            if isinstance(result, (PlanningSuccess, PlanningCancelled)):
                break

        assert result is not None
        self.planning_result = result
        if isinstance(result, PlanningSuccess):
            self.raw_path = extract_path(result.tree, result.goal_node_index)
            self.compacted_path = compact_path(
                self.checker, self.raw_path, strategy=params.compaction
            )
            self.report.path_found = True
            self.report.raw_path = list(self.raw_path)
            self.report.raw_path_length = self.raw_path.length()
            self.report.compacted_path = list(self.compacted_path)
            self.report.compacted_path_length = self.compacted_path.length()
            self.logger.append(
                utils.SimLog(
                    f"Raw path has {len(self.raw_path)} points "
                    f"(length {self.raw_path.length():.2f}), compacted path has "
                    f"{len(self.compacted_path)} points "
                    f"(length {self.compacted_path.length():.2f}).",
                    0,
                )
            )
        else:
            self.logger.append(
                utils.SimLog(
                    f"No path found after {len(self.report.attempts)} attempt(s).", 0
                )
            )
        return result

    def step(self, step_count: int) -> FollowResult:
        if self.compacted_path is None:
            raise Exception("No path to follow, call plan() first")

        previous_index = self.waypoint_index
        prev_position = self.robot.position
        result = follow_step(
            self.robot, self.compacted_path, self.waypoint_index, self.follower_params
        )
        self.waypoint_index = result.waypoint_index
        self.status = result.status
        self.trajectory.append(copy.copy(self.robot))
        self.report.distance_traveled += utils.euclidean_distance(
            prev_position, self.robot.position
        )

        last_reached = min(result.waypoint_index, len(self.compacted_path))
        for index in range(previous_index, last_reached):
            self.logger.append(
                utils.SimLog(
                    f"Reached waypoint {index} at {tuple(self.compacted_path[index])}.",
                    step_count,
                )
            )
        return result

    def run(self) -> SimulationReport:
        if self.planning_result is None:
            self.plan()

        if self.compacted_path is not None:
            self.logger.append(utils.SimLog("Starting run.", 0))
            step_count = 0
            while step_count < self.scenario.max_ticks:
                step_count += 1
                result = self.step(step_count)
                if result.reached_goal:
                    self.logger.append(
                        utils.SimLog(
                            f"Robot reached the goal in {step_count} ticks.",
                            step_count,
                        )
                    )
                    break
            else:
                self.logger.append(
                    utils.SimLog(
                        "Robot did not reach the goal within "
                        f"{self.scenario.max_ticks} ticks.",
                        step_count,
                    )
                )
            self.report.ticks = step_count

        self.report.reached_goal = self.status == FollowStatus.REACHED_GOAL
        self.report.final_pose = (self.robot.x, self.robot.y, self.robot.heading)

        if self.scenario.generate_report and self.logs_dir:
            report_path = os.path.join(self.logs_dir, "report.json")
            self.report.save(report_path)
            self.logger.append(utils.SimLog(f"Report saved to {report_path}.", 0))
        return self.report


def create_sim_from_file(
    simulation_file_path: str,
    logs_dir: str | None = None,
    logger: utils.SimLogger | None = None,
    seed: int | None = None,
) -> Simulator:
    scenario = scenario_from_yaml(os.path.abspath(simulation_file_path))
    if seed is not None:
        scenario.planner.random_seed = seed

    if logs_dir is not None and not os.path.isdir(logs_dir):
        os.makedirs(logs_dir)

    return Simulator(
        scenario=scenario,
        logger=logger if logger is not None else utils.SimLogger(),
        logs_dir=logs_dir,
    )
