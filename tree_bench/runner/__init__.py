r"""
Benchmark runner and timing.

Coordinates the shared tree, the per-backend lifecycle and the timed
query across adapters.

    from tree_bench.runner import BenchmarkRunner

    runner = BenchmarkRunner(adapters)
    result = runner.run()
"""

from tree_bench.runner.orchestrator import BenchmarkRunner, ProgressCallback, RunnerConfig
from tree_bench.runner.timing import Timer

__all__ = [
    "BenchmarkRunner",
    "ProgressCallback",
    "RunnerConfig",
    "Timer",
]
