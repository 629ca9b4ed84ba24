r"""
Storage adapters for tree-bench.

Each adapter implements the TreeStore protocol to map the same tree
onto one backend's physical schema.

    from tree_bench.adapters import AdapterRegistry

    adapter = AdapterRegistry.create("neo4j")
    adapter.init(uri="neo4j://localhost:7687")
"""

from tree_bench.adapters.base import AdapterRegistry, BaseAdapter
from tree_bench.adapters.document import ArangoTreeAdapter
from tree_bench.adapters.graph import Neo4jTreeAdapter
from tree_bench.adapters.relational import ClosureTableAdapter

__all__ = [
    "AdapterRegistry",
    "ArangoTreeAdapter",
    "BaseAdapter",
    "ClosureTableAdapter",
    "DEFAULT_ADAPTERS",
    "Neo4jTreeAdapter",
]

# Execution and report order: graph, relational, document-graph.
DEFAULT_ADAPTERS = ["neo4j", "mysql", "arangodb"]
