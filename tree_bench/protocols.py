r"""
Protocol definitions for tree storage adapters.

All adapters must implement the TreeStore protocol.

    from tree_bench.protocols import TreeStore

    class MyAdapter(TreeStore):
        ...
"""

from typing import Any, Protocol, runtime_checkable

from tree_bench.types import QueryTiming, TreeNode

__all__ = ["TreeStore"]


@runtime_checkable
class TreeStore(Protocol):
    """Protocol for tree storage adapters.

    Each backend (MySQL closure table, Neo4j, ArangoDB) must implement
    this protocol to be driven by the benchmark runner.
    """

    @property
    def name(self) -> str:
        """Human-readable adapter name."""
        ...

    def init(self, *, uri: str | None = None, **kwargs: Any) -> None:
        """Connect and ensure schema objects exist."""
        ...

    def disconnect(self) -> None:
        """Close connection to the database."""
        ...

    def insert_data(self, tree: TreeNode) -> None:
        """Persist every node and direct parent-child edge of the tree."""
        ...

    def delete_all(self) -> None:
        """Remove all nodes and edges, keeping schema objects."""
        ...

    def execute(self, depth: int, *, root_id: str | None = None) -> float:
        """Run the descendant query and return elapsed milliseconds."""
        ...

    def measure(self, depth: int, *, root_id: str | None = None) -> QueryTiming:
        """Run the descendant query and return timing with result rows."""
        ...
