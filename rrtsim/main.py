import typing as t

import typer

from rrtsim.algorithms.rrt import PlanningSuccess
from rrtsim.exceptions import InvalidConfiguration
from rrtsim.simulator import create_sim_from_file

app = typer.Typer()


@app.command()
def run(
    scenario: str,
    logs_dir: t.Annotated[t.Optional[str], typer.Option("--logs-dir")] = None,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
):
    """Plans a path for the scenario and drives the robot along it."""
    try:
        sim = create_sim_from_file(
            simulation_file_path=scenario, logs_dir=logs_dir, seed=seed
        )
    except InvalidConfiguration as e:
        typer.echo(f"Invalid scenario: {e.message}", err=True)
        raise typer.Exit(code=2)

    report = sim.run()
    if not report.path_found:
        raise typer.Exit(code=1)
    if not report.reached_goal:
        raise typer.Exit(code=3)


@app.command()
def plan(
    scenario: str,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
):
    """Plans a path for the scenario and prints the raw and compacted waypoints."""
    try:
        sim = create_sim_from_file(simulation_file_path=scenario, seed=seed)
    except InvalidConfiguration as e:
        typer.echo(f"Invalid scenario: {e.message}", err=True)
        raise typer.Exit(code=2)

    result = sim.plan()
    if not isinstance(result, PlanningSuccess):
        raise typer.Exit(code=1)

    assert sim.raw_path is not None and sim.compacted_path is not None
    typer.echo("raw path:")
    for x, y in sim.raw_path:
        typer.echo(f"  {x:.3f} {y:.3f}")
    typer.echo("compacted path:")
    for x, y in sim.compacted_path:
        typer.echo(f"  {x:.3f} {y:.3f}")


if __name__ == "__main__":
    app()
