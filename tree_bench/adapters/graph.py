r"""
Neo4j graph adapter.

Stores the tree as :Node nodes linked by directed CHILD relationships
and finds descendants with a fixed-length path pattern.

Requires: pip install neo4j

Environment variables:
    TREE_BENCH_NEO4J_URI: Connection URI (default: neo4j://localhost:7687)
    TREE_BENCH_NEO4J_USER: Username (default: neo4j)
    TREE_BENCH_NEO4J_PASSWORD: Password (default: test)
    TREE_BENCH_NEO4J_DATABASE: Database name (default: server default)

    from tree_bench.adapters.graph import Neo4jTreeAdapter

    adapter = Neo4jTreeAdapter()
    adapter.init(uri="neo4j://localhost:7687", user="neo4j", password="test")
"""

import logging
from typing import Any

from tree_bench import errors
from tree_bench.adapters.base import AdapterRegistry, BaseAdapter
from tree_bench.config import get_env
from tree_bench.types import TreeNode

__all__ = ["Neo4jTreeAdapter"]

logger = logging.getLogger(__name__)

CREATE_ROOT = "CREATE (:Node {id: $id})"
CREATE_CHILD = "MATCH (p:Node {id: $parent_id}) CREATE (p)-[:CHILD]->(:Node {id: $id})"


@AdapterRegistry.register("neo4j")
class Neo4jTreeAdapter(BaseAdapter):
    """Neo4j native graph adapter."""

    def __init__(self) -> None:
        self._driver: Any = None
        self._database: str | None = None
        self._connected = False

    @property
    def name(self) -> str:
        return "Neo4j"

    def init(self, *, uri: str | None = None, **kwargs: Any) -> None:
        try:
            from neo4j import GraphDatabase
            from neo4j.exceptions import DriverError, Neo4jError
        except ImportError as e:
            msg = "neo4j package not installed. Install with: pip install neo4j"
            raise ImportError(msg) from e

        uri = uri or get_env("NEO4J_URI", default="neo4j://localhost:7687")
        user = kwargs.get("user") or get_env("NEO4J_USER", default="neo4j")
        password = kwargs.get("password") or get_env("NEO4J_PASSWORD", default="test")
        self._database = kwargs.get("database") or get_env("NEO4J_DATABASE")

        try:
            driver = GraphDatabase.driver(uri, auth=(user, password))
            driver.verify_connectivity()
        except (DriverError, Neo4jError) as e:
            msg = f"Could not connect to {self.name} at {uri}: {e}"
            raise errors.ConnectionError(msg) from e

        # Schema-free: nodes and CHILD relationships are created on demand.
        self.disconnect()
        self._driver = driver
        self._connected = True
        logger.debug("%s initialized at %s", self.name, uri)

    def disconnect(self) -> None:
        if self._driver:
            self._driver.close()
            self._driver = None
        self._connected = False

    def _session(self) -> Any:
        self._require_connection()
        return self._driver.session(database=self._database)

    def insert_data(self, tree: TreeNode) -> None:
        from neo4j.exceptions import DriverError, Neo4jError

        with self._session() as session:
            try:
                tx = session.begin_transaction()
                try:
                    self._create_subtree(tx, tree, None)
                    tx.commit()
                except Exception as e:
                    try:
                        tx.rollback()
                    except (DriverError, Neo4jError) as rollback_error:
                        msg = f"{self.name} insert failed ({e}) and rollback failed: {rollback_error}"
                        raise errors.WriteError(msg) from rollback_error
                    raise
            except (DriverError, Neo4jError) as e:
                msg = f"{self.name} insert failed and was rolled back: {e}"
                raise errors.WriteError(msg) from e

        logger.debug("%s: inserted tree rooted at %s", self.name, tree.id)

    def _create_subtree(self, tx: Any, node: TreeNode, parent_id: str | None) -> None:
        """Create a node and its incoming CHILD relationship, then recurse."""
        if parent_id is None:
            tx.run(CREATE_ROOT, id=node.id).consume()
        else:
            tx.run(CREATE_CHILD, parent_id=parent_id, id=node.id).consume()

        for child in node.children:
            self._create_subtree(tx, child, node.id)

    def delete_all(self) -> None:
        from neo4j.exceptions import DriverError, Neo4jError

        with self._session() as session:
            try:
                session.run("MATCH (n:Node) DETACH DELETE n").consume()
            except (DriverError, Neo4jError) as e:
                msg = f"{self.name} delete failed: {e}"
                raise errors.WriteError(msg) from e

    def find_root_candidate(self) -> str:
        from neo4j.exceptions import DriverError, Neo4jError

        with self._session() as session:
            try:
                record = session.run("MATCH (n:Node) RETURN n.id AS id ORDER BY n.id LIMIT 1").single()
            except (DriverError, Neo4jError) as e:
                msg = f"{self.name} root lookup failed: {e}"
                raise errors.QueryError(msg) from e

        if record is None:
            msg = f"{self.name} has no nodes to select a root from"
            raise errors.QueryError(msg)
        return record["id"]

    def find_descendants(self, root_id: str, depth: int) -> list[str]:
        from neo4j.exceptions import DriverError, Neo4jError

        self._check_depth(depth)
        # Variable-length bounds cannot be parameters.
        query = f"MATCH (root:Node {{id: $root_id}})-[:CHILD*{depth}..{depth}]->(leaf:Node) RETURN leaf.id AS id"

        with self._session() as session:
            try:
                result = session.run(query, root_id=root_id)
                return [record["id"] for record in result]
            except (DriverError, Neo4jError) as e:
                msg = f"{self.name} descendant query failed: {e}"
                raise errors.QueryError(msg) from e

    def node_ids(self) -> set[str]:
        with self._session() as session:
            result = session.run("MATCH (n:Node) RETURN n.id AS id")
            return {record["id"] for record in result}

    def edge_pairs(self) -> set[tuple[str, str]]:
        with self._session() as session:
            result = session.run("MATCH (p:Node)-[:CHILD]->(c:Node) RETURN p.id AS parent, c.id AS child")
            return {(record["parent"], record["child"]) for record in result}

    def count_nodes(self) -> int:
        with self._session() as session:
            record = session.run("MATCH (n:Node) RETURN count(n) AS count").single()
            return record["count"] if record else 0

    def count_edges(self) -> int:
        with self._session() as session:
            record = session.run("MATCH (:Node)-[r:CHILD]->(:Node) RETURN count(r) AS count").single()
            return record["count"] if record else 0
