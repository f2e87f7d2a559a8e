from rrtsim.algorithms.path_compaction import compact_path
from rrtsim.algorithms.rrt import PlanningSuccess, RRTPlanner
from rrtsim.data_models import scenario_from_yaml
from rrtsim.navigation.navigation_path import extract_path
from rrtsim.utils.collision import CollisionChecker
from rrtsim.world.field import ObstacleField


scenario = scenario_from_yaml("tests/scenarios/barriers.yaml")
field = ObstacleField.from_config(scenario)
checker = CollisionChecker(field, inflation_radius=scenario.robot_radius)
planner = RRTPlanner.from_parameters(
    checker, scenario.start, scenario.goal, scenario.planner
)
result = planner.plan()
assert isinstance(result, PlanningSuccess), str(result)
raw_path = extract_path(result.tree, result.goal_node_index)
compacted = compact_path(checker, raw_path, strategy=scenario.planner.compaction)
assert len(compacted) <= len(raw_path)
print(result)
print(compacted)
