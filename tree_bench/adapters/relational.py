r"""
Relational closure-table adapter.

Stores the tree as a Nodes table plus a ClosureTable of direct
(ancestor, descendant) pairs. Descendants at depth D are found by
self-joining the closure table D times.

Requires: pip install sqlalchemy pymysql

Environment variables:
    TREE_BENCH_MYSQL_HOST: Server host (default: localhost)
    TREE_BENCH_MYSQL_PORT: Server port (default: driver default)
    TREE_BENCH_MYSQL_USER: Username (default: test)
    TREE_BENCH_MYSQL_PASSWORD: Password (default: test)
    TREE_BENCH_MYSQL_DATABASE: Database name (default: test)

    from tree_bench.adapters.relational import ClosureTableAdapter

    adapter = ClosureTableAdapter()
    adapter.init(host="localhost", user="test", password="test", database="test")

Any SQLAlchemy URL may be passed as ``uri`` instead (e.g. "sqlite://").
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from tree_bench import errors
from tree_bench.adapters.base import AdapterRegistry, BaseAdapter
from tree_bench.config import get_env
from tree_bench.types import TreeNode

__all__ = ["ClosureTableAdapter", "build_schema"]

logger = logging.getLogger(__name__)

NODES_TABLE = "Nodes"
CLOSURE_TABLE = "ClosureTable"

# (disable, enable) statements per dialect; session scoped
_FOREIGN_KEY_TOGGLES: dict[str, tuple[str, str]] = {
    "mysql": ("SET foreign_key_checks=0", "SET foreign_key_checks=1"),
    "sqlite": ("PRAGMA foreign_keys=OFF", "PRAGMA foreign_keys=ON"),
}


def build_schema() -> tuple[Any, Any, Any]:
    """Return (metadata, nodes table, closure table)."""
    from sqlalchemy import Column, ForeignKey, MetaData, String, Table

    metadata = MetaData()
    nodes = Table(
        NODES_TABLE,
        metadata,
        Column("id", String(255), primary_key=True),
    )
    # Only direct parent -> child pairs, not the transitive closure.
    closure = Table(
        CLOSURE_TABLE,
        metadata,
        Column("ancestor", String(255), ForeignKey(f"{NODES_TABLE}.id"), primary_key=True),
        Column("descendant", String(255), ForeignKey(f"{NODES_TABLE}.id"), primary_key=True),
    )
    return metadata, nodes, closure


@AdapterRegistry.register("mysql")
class ClosureTableAdapter(BaseAdapter):
    """MySQL closure-table adapter."""

    def __init__(self) -> None:
        self._engine: Any = None
        self._nodes: Any = None
        self._closure: Any = None
        self._connected = False

    @property
    def name(self) -> str:
        return "MySQL"

    def init(self, *, uri: str | None = None, **kwargs: Any) -> None:
        try:
            from sqlalchemy import create_engine, text
            from sqlalchemy.exc import SQLAlchemyError
        except ImportError as e:
            msg = "sqlalchemy package not installed. Install with: pip install sqlalchemy pymysql"
            raise ImportError(msg) from e

        url = uri or self._mysql_url(**kwargs)

        try:
            engine = create_engine(url)
        except ImportError as e:
            msg = f"Database driver for {self.name} not installed. Install with: pip install pymysql ({e})"
            raise ImportError(msg) from e

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            engine.dispose()
            msg = f"Could not connect to {self.name}: {e}"
            raise errors.ConnectionError(msg) from e

        self.disconnect()
        metadata, self._nodes, self._closure = build_schema()
        try:
            metadata.create_all(engine)
        except SQLAlchemyError as e:
            engine.dispose()
            msg = f"Could not create closure-table schema: {e}"
            raise errors.SchemaError(msg) from e

        self._engine = engine
        self._connected = True
        logger.debug("%s initialized (%s)", self.name, engine.dialect.name)

    @staticmethod
    def _mysql_url(**kwargs: Any) -> Any:
        from sqlalchemy.engine import URL

        port = kwargs.get("port") or get_env("MYSQL_PORT")
        return URL.create(
            "mysql+pymysql",
            username=kwargs.get("user") or get_env("MYSQL_USER", default="test"),
            password=kwargs.get("password") or get_env("MYSQL_PASSWORD", default="test"),
            host=kwargs.get("host") or get_env("MYSQL_HOST", default="localhost"),
            port=int(port) if port else None,
            database=kwargs.get("database") or get_env("MYSQL_DATABASE", default="test"),
        )

    def disconnect(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._connected = False

    @contextmanager
    def _foreign_key_checks_disabled(self, conn: Any) -> Iterator[None]:
        """Disable referential-integrity checks, restoring them on exit.

        Each toggle is committed on its own so it never runs inside the
        data transaction; SQLite ignores the pragma there.
        """
        from sqlalchemy import text

        toggle = _FOREIGN_KEY_TOGGLES.get(conn.dialect.name)
        if toggle is None:
            yield
            return

        disable, enable = toggle
        conn.execute(text(disable))
        conn.commit()
        try:
            yield
        finally:
            conn.execute(text(enable))
            conn.commit()

    def insert_data(self, tree: TreeNode) -> None:
        self._require_connection()
        from sqlalchemy import insert
        from sqlalchemy.exc import SQLAlchemyError

        nodes: list[dict[str, str]] = []
        relations: list[dict[str, str]] = []
        for node, parent_id in tree.walk():
            nodes.append({"id": node.id})
            if parent_id is not None:
                relations.append({"ancestor": parent_id, "descendant": node.id})

        try:
            with self._engine.connect() as conn, self._foreign_key_checks_disabled(conn):
                with conn.begin():
                    conn.execute(insert(self._nodes), nodes)
                    if relations:
                        conn.execute(insert(self._closure), relations)
        except SQLAlchemyError as e:
            msg = f"{self.name} insert failed: {e}"
            raise errors.WriteError(msg) from e

        logger.debug("%s: inserted %d nodes, %d closure rows", self.name, len(nodes), len(relations))

    def delete_all(self) -> None:
        self._require_connection()
        from sqlalchemy import delete
        from sqlalchemy.exc import SQLAlchemyError

        try:
            with self._engine.begin() as conn:
                conn.execute(delete(self._closure))
                conn.execute(delete(self._nodes))
        except SQLAlchemyError as e:
            msg = f"{self.name} delete failed: {e}"
            raise errors.WriteError(msg) from e

    def find_root_candidate(self) -> str:
        self._require_connection()
        from sqlalchemy import select
        from sqlalchemy.exc import SQLAlchemyError

        stmt = select(self._nodes.c.id).order_by(self._nodes.c.id).limit(1)
        try:
            with self._engine.connect() as conn:
                root_id = conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            msg = f"{self.name} root lookup failed: {e}"
            raise errors.QueryError(msg) from e

        if root_id is None:
            msg = f"{self.name} has no nodes to select a root from"
            raise errors.QueryError(msg)
        return root_id

    def find_descendants(self, root_id: str, depth: int) -> list[str]:
        self._require_connection()
        self._check_depth(depth)
        from sqlalchemy import select
        from sqlalchemy.exc import SQLAlchemyError

        if depth == 0:
            stmt = select(self._nodes.c.id).where(self._nodes.c.id == root_id)
        else:
            hops = [self._closure.alias(f"c{i}") for i in range(1, depth + 1)]
            joined = hops[0]
            for prev, hop in zip(hops, hops[1:]):
                joined = joined.join(hop, prev.c.descendant == hop.c.ancestor)
            stmt = select(hops[-1].c.descendant).select_from(joined).where(hops[0].c.ancestor == root_id)

        try:
            with self._engine.connect() as conn:
                return list(conn.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            msg = f"{self.name} descendant query failed: {e}"
            raise errors.QueryError(msg) from e

    def node_ids(self) -> set[str]:
        self._require_connection()
        from sqlalchemy import select

        with self._engine.connect() as conn:
            return set(conn.execute(select(self._nodes.c.id)).scalars())

    def edge_pairs(self) -> set[tuple[str, str]]:
        self._require_connection()
        from sqlalchemy import select

        stmt = select(self._closure.c.ancestor, self._closure.c.descendant)
        with self._engine.connect() as conn:
            return {(row.ancestor, row.descendant) for row in conn.execute(stmt)}

    def count_nodes(self) -> int:
        self._require_connection()
        from sqlalchemy import func, select

        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(self._nodes)).scalar_one()

    def count_edges(self) -> int:
        self._require_connection()
        from sqlalchemy import func, select

        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(self._closure)).scalar_one()
