r"""
Benchmark runner for coordinating execution.

Drives every adapter through the same lifecycle: init, delete-all,
insert one shared tree, then the timed descendant query.

    from tree_bench.runner import BenchmarkRunner, RunnerConfig

    runner = BenchmarkRunner(adapters, config=RunnerConfig(depth=3))
    result = runner.run()
"""

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from dataclasses import dataclass
from typing import ParamSpec, TypeVar

from tree_bench.config import DEFAULT_TREE_DEPTH
from tree_bench.datasets import generate_tree
from tree_bench.protocols import TreeStore
from tree_bench.types import RunResult

__all__ = ["BenchmarkRunner", "RunnerConfig", "ProgressCallback"]

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# (database, phase, status); database is None for the tree generation phase
ProgressCallback = Callable[[str | None, str, str], None]


@dataclass
class RunnerConfig:
    """Configuration for a benchmark run.

    Attributes:
        depth: Depth of the generated tree and of the descendant query.
        seed: Random seed for the tree generator (None = unseeded).
        use_root_heuristic: Let each adapter pick the smallest stored id
            as root instead of passing the generated root id.
    """

    depth: int = DEFAULT_TREE_DEPTH
    seed: int | None = None
    use_root_heuristic: bool = False

    def __post_init__(self) -> None:
        if self.depth < 0:
            msg = f"Tree depth must be non-negative, got {self.depth}"
            raise ValueError(msg)


class BenchmarkRunner:
    """Runs the tree benchmark across adapters, one backend at a time.

    Every adapter call is submitted to that adapter's own single-worker
    thread and awaited before the next call is made. Errors propagate
    unchanged; there are no partial results.
    """

    def __init__(self, adapters: Sequence[TreeStore], *, config: RunnerConfig | None = None) -> None:
        self._adapters = list(adapters)
        self._config = config or RunnerConfig()
        self._progress_callback: ProgressCallback | None = None

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set callback for progress updates."""
        self._progress_callback = callback

    def _notify(self, database: str | None, phase: str, status: str) -> None:
        if self._progress_callback:
            self._progress_callback(database, phase, status)

    def _call(
        self,
        worker: ThreadPoolExecutor,
        adapter: TreeStore,
        phase: str,
        func: Callable[P, R],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        """Run one adapter phase on the adapter's worker and wait for it."""
        self._notify(adapter.name, phase, "running")
        value = worker.submit(func, *args, **kwargs).result()
        self._notify(adapter.name, phase, "done")
        return value

    def run(self) -> RunResult:
        """Run the benchmark.

        Returns:
            RunResult with one timing per adapter, in adapter order.
        """
        depth = self._config.depth
        result = RunResult(depth=depth)
        result.started_at = time.time()

        with ExitStack() as stack:
            lanes = [
                (adapter, stack.enter_context(ThreadPoolExecutor(max_workers=1, thread_name_prefix=adapter.name)))
                for adapter in self._adapters
            ]

            for adapter, worker in lanes:
                self._call(worker, adapter, "init", adapter.init)

            for adapter, worker in lanes:
                self._call(worker, adapter, "delete", adapter.delete_all)

            self._notify(None, "generate", "running")
            tree = generate_tree(depth, seed=self._config.seed)
            result.root_id = tree.id
            result.node_count = tree.node_count
            result.edge_count = len(tree.edges())
            result.expected_rows = len(tree.nodes_at_depth(depth))
            self._notify(None, "generate", "done")
            logger.debug(
                "Generated tree: %d nodes, %d edges, height %d", result.node_count, result.edge_count, tree.height
            )

            for adapter, worker in lanes:
                self._call(worker, adapter, "insert", adapter.insert_data, tree)

            root_id = None if self._config.use_root_heuristic else tree.id
            for adapter, worker in lanes:
                timing = self._call(worker, adapter, "execute", adapter.measure, depth, root_id=root_id)
                if timing.root_id == tree.id and timing.row_count != result.expected_rows:
                    logger.warning(
                        "%s returned %d rows at depth %d, expected %d",
                        timing.database,
                        timing.row_count,
                        depth,
                        result.expected_rows,
                    )
                result.timings.append(timing)

        result.completed_at = time.time()
        logger.debug("Run completed in %.3f s", result.duration_seconds)
        return result
