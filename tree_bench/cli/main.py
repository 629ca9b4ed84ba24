r"""
Command-line interface for tree-bench.

    tree-bench
    tree-bench --depth 4 --seed 7 --databases neo4j,mysql
"""

import logging
from typing import Annotated

import typer

from tree_bench.adapters import DEFAULT_ADAPTERS, AdapterRegistry
from tree_bench.config import get_tree_depth
from tree_bench.runner import BenchmarkRunner, RunnerConfig

__all__ = ["app", "main"]

app = typer.Typer(
    name="tree-bench",
    help="Benchmark descendant queries over one tree stored in MySQL, Neo4j and ArangoDB.",
)

_RUNNING = {
    "init": "Initializing {db}...",
    "delete": "Deleting all data from {db}...",
    "generate": "Creating tree...",
    "insert": "Inserting data into {db}...",
    "execute": "Executing {db}...",
}

_DONE = {
    "init": "{db} initialized.",
    "delete": "All data deleted from {db}.",
    "generate": "Tree created.",
    "insert": "Data inserted into {db}.",
    "execute": "{db} executed.",
}


def _echo_progress(db: str | None, phase: str, status: str) -> None:
    messages = _RUNNING if status == "running" else _DONE
    typer.echo(messages[phase].format(db=db))


@app.command()
def run(
    depth: Annotated[
        int | None, typer.Option("-d", "--depth", min=0, help="Tree and query depth (default: TREE_BENCH_TREE_DEPTH or 2)")
    ] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Random seed for the tree")] = None,
    databases: Annotated[
        str | None, typer.Option("--databases", help="Databases to benchmark (comma-separated)")
    ] = None,
    root_heuristic: Annotated[
        bool, typer.Option("--root-heuristic", help="Let each database pick its smallest id as root")
    ] = False,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Verbose output")] = False,
) -> None:
    """Run the tree benchmark and print query durations in milliseconds."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    db_list = [name.strip() for name in databases.split(",")] if databases else DEFAULT_ADAPTERS
    unknown = [name for name in db_list if AdapterRegistry.get(name) is None]
    if unknown:
        valid = ", ".join(AdapterRegistry.list())
        typer.echo(f"Error: unknown database(s) {', '.join(unknown)}. Valid: {valid}", err=True)
        raise typer.Exit(1)

    config = RunnerConfig(
        depth=get_tree_depth() if depth is None else depth,
        seed=seed,
        use_root_heuristic=root_heuristic,
    )
    adapters = [AdapterRegistry.create(name) for name in db_list]
    runner = BenchmarkRunner(adapters, config=config)
    runner.set_progress_callback(_echo_progress)

    try:
        result = runner.run()
    finally:
        for adapter in adapters:
            adapter.disconnect()

    for elapsed_ms in result.durations_ms().values():
        typer.echo(f"{elapsed_ms:.3f}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
