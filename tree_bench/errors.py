r"""
Error taxonomy for tree-bench adapters.

Driver exceptions are wrapped into these with ``raise ... from e``
so callers only deal with one hierarchy.

    from tree_bench import errors

    try:
        adapter.init()
    except errors.ConnectionError:
        ...
"""

__all__ = [
    "TreeBenchError",
    "ConnectionError",
    "SchemaError",
    "WriteError",
    "QueryError",
]


class TreeBenchError(Exception):
    """Base class for tree-bench errors."""


class ConnectionError(TreeBenchError):  # noqa: A001
    """Backend unreachable, credentials rejected, or adapter not initialized."""


class SchemaError(TreeBenchError):
    """Table or collection creation failed."""


class WriteError(TreeBenchError):
    """Insert or delete rejected by the backend."""


class QueryError(TreeBenchError):
    """Benchmark query failed or found no root candidate."""
