r"""
Base adapter implementation with common functionality.

Defines the tree storage contract and the timed query shared by
every backend.

    from tree_bench.adapters.base import BaseAdapter

    class MyAdapter(BaseAdapter):
        def init(self, *, uri: str | None = None, **kwargs) -> None:
            ...
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from tree_bench import errors
from tree_bench.runner.timing import Timer
from tree_bench.types import QueryTiming, TreeNode

__all__ = ["BaseAdapter", "AdapterRegistry"]

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry for tree storage adapters."""

    _adapters: dict[str, type["BaseAdapter"]] = {}

    @classmethod
    def register(cls, name: str) -> Any:
        """Decorator to register an adapter class."""

        def decorator(adapter_cls: type["BaseAdapter"]) -> type["BaseAdapter"]:
            cls._adapters[name] = adapter_cls
            return adapter_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type["BaseAdapter"] | None:
        """Get adapter class by name."""
        return cls._adapters.get(name)

    @classmethod
    def list(cls) -> list[str]:
        """List registered adapter names."""
        return list(cls._adapters.keys())

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> "BaseAdapter":
        """Create adapter instance by name."""
        adapter_cls = cls.get(name)
        if adapter_cls is None:
            valid = ", ".join(cls.list()) or "none"
            msg = f"Unknown adapter '{name}'. Registered: {valid}"
            raise ValueError(msg)
        return adapter_cls(**kwargs)


class BaseAdapter(ABC):
    """Base class for tree storage adapters.

    Subclasses map the four benchmark operations (init, insert_data,
    delete_all, execute) onto one backend's physical schema. The base
    class owns no backend state; it only times the descendant query.
    """

    _connected: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable adapter name."""
        ...

    @property
    def connected(self) -> bool:
        """Whether adapter is currently connected."""
        return self._connected

    @abstractmethod
    def init(self, *, uri: str | None = None, **kwargs: Any) -> None:
        """Establish connection and ensure schema objects exist.

        Safe to call when the schema already exists.

        Raises:
            errors.ConnectionError: Backend unreachable or credentials rejected.
            errors.SchemaError: Schema objects could not be created.
        """
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to the database."""
        ...

    @abstractmethod
    def insert_data(self, tree: TreeNode) -> None:
        """Persist every node and every direct parent-child edge.

        Raises:
            errors.WriteError: The backend rejected the insert.
        """
        ...

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every node and edge, leaving schema objects intact."""
        ...

    @abstractmethod
    def find_root_candidate(self) -> str:
        """Return the lexicographically smallest stored node id.

        Raises:
            errors.QueryError: No nodes are stored.
        """
        ...

    @abstractmethod
    def find_descendants(self, root_id: str, depth: int) -> list[str]:
        """Return ids of nodes exactly ``depth`` hops below ``root_id``."""
        ...

    @abstractmethod
    def node_ids(self) -> set[str]:
        """Return every stored node id."""
        ...

    @abstractmethod
    def edge_pairs(self) -> set[tuple[str, str]]:
        """Return every stored (parent_id, child_id) pair."""
        ...

    def count_nodes(self) -> int:
        """Count stored nodes."""
        return len(self.node_ids())

    def count_edges(self) -> int:
        """Count stored parent-child edges."""
        return len(self.edge_pairs())

    def measure(self, depth: int, *, root_id: str | None = None) -> QueryTiming:
        """Run the benchmark query and return its timing and rows.

        When ``root_id`` is None the root candidate lookup is issued
        inside the timed region.
        """
        self._check_depth(depth)
        with Timer() as timer:
            root = root_id if root_id is not None else self.find_root_candidate()
            rows = self.find_descendants(root, depth)

        logger.debug("%s: %d rows at depth %d in %.3f ms", self.name, len(rows), depth, timer.elapsed_ms)
        return QueryTiming(
            database=self.name,
            depth=depth,
            root_id=root,
            elapsed_ns=timer.elapsed_ns,
            rows=tuple(rows),
        )

    def execute(self, depth: int, *, root_id: str | None = None) -> float:
        """Run the benchmark query and return elapsed milliseconds."""
        return self.measure(depth, root_id=root_id).elapsed_ms

    def _require_connection(self) -> None:
        if not self._connected:
            msg = f"{self.name} adapter is not connected; call init() first"
            raise errors.ConnectionError(msg)

    @staticmethod
    def _check_depth(depth: int) -> None:
        if depth < 0:
            msg = f"Query depth must be non-negative, got {depth}"
            raise ValueError(msg)

    def __enter__(self) -> "BaseAdapter":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - disconnect."""
        if self._connected:
            self.disconnect()

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"{self.__class__.__name__}({self.name}, {status})"
