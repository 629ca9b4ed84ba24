r"""
tree-bench: hierarchical data storage benchmark.

Stores one random tree in a MySQL closure table, a Neo4j graph and an
ArangoDB edge collection, then times the same "all descendants at
depth D" query against each.

    from tree_bench.adapters import AdapterRegistry
    from tree_bench.runner import BenchmarkRunner, RunnerConfig

    adapters = [AdapterRegistry.create(name) for name in ("neo4j", "mysql", "arangodb")]
    result = BenchmarkRunner(adapters, config=RunnerConfig(depth=3)).run()
"""

from tree_bench.config import DEFAULT_TREE_DEPTH, get_tree_depth
from tree_bench.errors import QueryError, SchemaError, TreeBenchError, WriteError
from tree_bench.types import QueryTiming, RunResult, TreeNode

__all__ = [
    "DEFAULT_TREE_DEPTH",
    "QueryError",
    "QueryTiming",
    "RunResult",
    "SchemaError",
    "TreeBenchError",
    "TreeNode",
    "WriteError",
    "get_tree_depth",
]

__version__ = "0.1.0"
