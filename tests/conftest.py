r"""
Shared pytest fixtures for tree-bench tests.
"""

import threading
from typing import Any

import pytest

from tree_bench import errors
from tree_bench.adapters.base import BaseAdapter
from tree_bench.datasets import RandomTreeGenerator
from tree_bench.types import TreeNode


class InMemoryTreeStore(BaseAdapter):
    """Dict-backed adapter that records every call and the thread it ran on."""

    def __init__(self, name: str = "Memory", *, calls: list[tuple[str, str, str]] | None = None) -> None:
        self._name = name
        self._nodes: set[str] = set()
        self._edges: set[tuple[str, str]] = set()
        self._connected = False
        self.calls = calls if calls is not None else []
        self.fail_on: str | None = None

    @property
    def name(self) -> str:
        return self._name

    def _record(self, op: str) -> None:
        self.calls.append((self._name, op, threading.current_thread().name))
        if self.fail_on == op:
            msg = f"{self._name} {op} failed"
            raise errors.WriteError(msg)

    def init(self, *, uri: str | None = None, **kwargs: Any) -> None:
        self._connected = True
        self._record("init")

    def disconnect(self) -> None:
        self._connected = False
        self.calls.append((self._name, "disconnect", threading.current_thread().name))

    def insert_data(self, tree: TreeNode) -> None:
        self._require_connection()
        self._record("insert")
        self._nodes |= tree.node_ids()
        self._edges |= set(tree.edges())

    def delete_all(self) -> None:
        self._require_connection()
        self._record("delete")
        self._nodes.clear()
        self._edges.clear()

    def find_root_candidate(self) -> str:
        self._record("root")
        if not self._nodes:
            msg = f"{self._name} has no nodes to select a root from"
            raise errors.QueryError(msg)
        return min(self._nodes)

    def find_descendants(self, root_id: str, depth: int) -> list[str]:
        self._record("execute")
        level = [root_id] if root_id in self._nodes else []
        for _ in range(depth):
            level = [child for parent, child in self._edges if parent in level]
        return level

    def node_ids(self) -> set[str]:
        return set(self._nodes)

    def edge_pairs(self) -> set[tuple[str, str]]:
        return set(self._edges)


@pytest.fixture
def memory_store_cls() -> type[InMemoryTreeStore]:
    """The in-memory adapter class."""
    return InMemoryTreeStore


@pytest.fixture
def sample_tree() -> TreeNode:
    """Root with 2 children; the first has 3 children, the second none.

    Ids sort so that the root is the smallest.
    """
    first = TreeNode(id="n1", children=[TreeNode(id="n3"), TreeNode(id="n4"), TreeNode(id="n5")])
    second = TreeNode(id="n2")
    return TreeNode(id="n0", children=[first, second])


@pytest.fixture
def random_tree() -> TreeNode:
    """Seeded random tree of depth 3."""
    return RandomTreeGenerator(seed=1234).generate(3)
