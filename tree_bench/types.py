r"""
Core types for tree storage benchmarks.

    from tree_bench.types import TreeNode, QueryTiming

    root = TreeNode()
    root.children.append(TreeNode())
    print(root.node_count, root.height)
"""

import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field

__all__ = [
    "TreeNode",
    "QueryTiming",
    "RunResult",
]


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(eq=False, slots=True)
class TreeNode:
    """A node of an in-memory tree.

    Attributes:
        id: Globally unique, opaque identifier (UUID4 by default).
        children: Ordered child nodes, owned exclusively by this node.
    """

    id: str = field(default_factory=_new_id)
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        """Number of nodes in the subtree rooted here."""
        return sum(1 for _ in self.walk())

    @property
    def height(self) -> int:
        """Maximum root-to-leaf hop count."""
        height = 0
        stack: list[tuple[TreeNode, int]] = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            height = max(height, depth)
            stack.extend((child, depth + 1) for child in node.children)
        return height

    def walk(self) -> Iterator[tuple["TreeNode", str | None]]:
        """Yield (node, parent_id) pairs depth-first with an explicit stack.

        The stack is LIFO, so the most recently discovered child is visited
        before siblings queued earlier. The root is yielded with parent_id None.
        """
        stack: list[tuple[TreeNode, str | None]] = [(self, None)]
        while stack:
            node, parent_id = stack.pop()
            yield node, parent_id
            for child in node.children:
                stack.append((child, node.id))

    def node_ids(self) -> set[str]:
        """Identifiers of every node in the subtree."""
        return {node.id for node, _ in self.walk()}

    def edges(self) -> list[tuple[str, str]]:
        """Direct (parent_id, child_id) pairs in walk order."""
        return [(parent_id, node.id) for node, parent_id in self.walk() if parent_id is not None]

    def nodes_at_depth(self, depth: int) -> list[str]:
        """Identifiers of nodes exactly ``depth`` hops below this node."""
        level = [self]
        for _ in range(depth):
            level = [child for node in level for child in node.children]
        return [node.id for node in level]


@dataclass(frozen=True, slots=True)
class QueryTiming:
    """Timing of one benchmark query against one backend.

    Attributes:
        database: Adapter name.
        depth: Query depth in hops.
        root_id: Root the query started from.
        elapsed_ns: Wall-clock duration in nanoseconds.
        rows: Identifiers returned by the query.
    """

    database: str
    depth: int
    root_id: str
    elapsed_ns: int
    rows: tuple[str, ...] = ()

    @property
    def elapsed_ms(self) -> float:
        """Duration in milliseconds."""
        return self.elapsed_ns / 1_000_000

    @property
    def row_count(self) -> int:
        """Number of rows returned."""
        return len(self.rows)


@dataclass
class RunResult:
    """Results of one benchmark run.

    Attributes:
        depth: Tree and query depth.
        node_count: Nodes in the generated tree.
        edge_count: Direct edges in the generated tree.
        expected_rows: Nodes at the query depth in the generated tree.
        root_id: Root of the generated tree.
        timings: One timing per adapter, in adapter order.
        started_at: Timestamp when the run started.
        completed_at: Timestamp when the run completed.
    """

    depth: int
    node_count: int = 0
    edge_count: int = 0
    expected_rows: int = 0
    root_id: str | None = None
    timings: list[QueryTiming] = field(default_factory=list)
    started_at: float = 0.0
    completed_at: float = 0.0

    @property
    def duration_seconds(self) -> float:
        """Total duration in seconds."""
        return self.completed_at - self.started_at

    def durations_ms(self) -> dict[str, float]:
        """Query durations in milliseconds keyed by database name."""
        return {timing.database: timing.elapsed_ms for timing in self.timings}
