r"""
ArangoDB document/edge-collection adapter.

Stores the tree as documents in a Nodes collection and parent -> child
edge documents in an Edges collection, and finds descendants with a
bounded-depth OUTBOUND traversal.

Requires: pip install python-arango

Environment variables:
    TREE_BENCH_ARANGO_URI: Connection URI (default: http://localhost:8529)
    TREE_BENCH_ARANGO_USER: Username (default: root)
    TREE_BENCH_ARANGO_PASSWORD: Password (default: test)
    TREE_BENCH_ARANGO_DATABASE: Database name (default: test)

    from tree_bench.adapters.document import ArangoTreeAdapter

    adapter = ArangoTreeAdapter()
    adapter.init(uri="http://localhost:8529", database="test")
"""

import logging
from typing import Any

from tree_bench import errors
from tree_bench.adapters.base import AdapterRegistry, BaseAdapter
from tree_bench.config import get_env
from tree_bench.types import TreeNode

__all__ = ["ArangoTreeAdapter"]

logger = logging.getLogger(__name__)

NODES = "Nodes"
EDGES = "Edges"

ROOT_QUERY = "FOR node IN Nodes SORT node._key LIMIT 1 RETURN node._key"
DESCENDANTS_QUERY = "FOR v IN @depth..@depth OUTBOUND @start Edges RETURN v._key"
NODE_KEYS_QUERY = "FOR node IN Nodes RETURN node._key"
EDGE_PAIRS_QUERY = "FOR e IN Edges RETURN {parent: e._from, child: e._to}"


def _node_handle(key: str) -> str:
    return f"{NODES}/{key}"


def _node_key(handle: str) -> str:
    return handle.split("/", 1)[1]


@AdapterRegistry.register("arangodb")
class ArangoTreeAdapter(BaseAdapter):
    """ArangoDB document/graph adapter."""

    def __init__(self) -> None:
        self._client: Any = None
        self._db: Any = None
        self._connected = False

    @property
    def name(self) -> str:
        return "ArangoDB"

    def init(self, *, uri: str | None = None, **kwargs: Any) -> None:
        try:
            from arango import ArangoClient
            from arango.exceptions import ArangoError
        except ImportError as e:
            msg = "python-arango package not installed. Install with: pip install python-arango"
            raise ImportError(msg) from e

        uri = uri or get_env("ARANGO_URI", default="http://localhost:8529")
        user = kwargs.get("user") or get_env("ARANGO_USER", default="root")
        password = kwargs.get("password") or get_env("ARANGO_PASSWORD", default="test")
        database = kwargs.get("database") or get_env("ARANGO_DATABASE", default="test")

        try:
            client = ArangoClient(hosts=uri)
            sys_db = client.db("_system", username=user, password=password, verify=True)
        except ArangoError as e:
            msg = f"Could not connect to {self.name} at {uri}: {e}"
            raise errors.ConnectionError(msg) from e

        self.disconnect()
        self._client = client
        try:
            if not sys_db.has_database(database):
                sys_db.create_database(database)
            self._db = client.db(database, username=user, password=password)
            self._ensure_collections()
        except ArangoError as e:
            msg = f"Could not create {self.name} database '{database}' or its collections: {e}"
            raise errors.SchemaError(msg) from e

        self._connected = True
        logger.debug("%s initialized at %s (database %s)", self.name, uri, database)

    def _ensure_collections(self) -> None:
        """Create the node and edge collections if they do not exist."""
        if not self._db.has_collection(NODES):
            self._db.create_collection(NODES)
        if not self._db.has_collection(EDGES):
            self._db.create_collection(EDGES, edge=True)

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
        self._connected = False

    def insert_data(self, tree: TreeNode) -> None:
        self._require_connection()
        from arango.exceptions import ArangoError

        nodes = self._db.collection(NODES)
        edges = self._db.collection(EDGES)

        count = 0
        try:
            for node, parent_id in tree.walk():
                nodes.insert({"_key": node.id})
                if parent_id is not None:
                    edges.insert({"_from": _node_handle(parent_id), "_to": _node_handle(node.id)})
                count += 1
        except ArangoError as e:
            msg = f"{self.name} insert failed after {count} nodes: {e}"
            raise errors.WriteError(msg) from e

        logger.debug("%s: inserted %d nodes", self.name, count)

    def delete_all(self) -> None:
        self._require_connection()
        from arango.exceptions import ArangoError

        try:
            for name in (NODES, EDGES):
                if self._db.has_collection(name):
                    self._db.collection(name).truncate()
        except ArangoError as e:
            msg = f"{self.name} delete failed: {e}"
            raise errors.WriteError(msg) from e

    def find_root_candidate(self) -> str:
        self._require_connection()
        from arango.exceptions import ArangoError

        try:
            keys = list(self._db.aql.execute(ROOT_QUERY))
        except ArangoError as e:
            msg = f"{self.name} root lookup failed: {e}"
            raise errors.QueryError(msg) from e

        if not keys:
            msg = f"{self.name} has no nodes to select a root from"
            raise errors.QueryError(msg)
        return keys[0]

    def find_descendants(self, root_id: str, depth: int) -> list[str]:
        self._require_connection()
        self._check_depth(depth)
        from arango.exceptions import ArangoError

        try:
            cursor = self._db.aql.execute(
                DESCENDANTS_QUERY,
                bind_vars={"depth": depth, "start": _node_handle(root_id)},
            )
            return list(cursor)
        except ArangoError as e:
            msg = f"{self.name} descendant query failed: {e}"
            raise errors.QueryError(msg) from e

    def node_ids(self) -> set[str]:
        self._require_connection()
        return set(self._db.aql.execute(NODE_KEYS_QUERY))

    def edge_pairs(self) -> set[tuple[str, str]]:
        self._require_connection()
        cursor = self._db.aql.execute(EDGE_PAIRS_QUERY)
        return {(_node_key(doc["parent"]), _node_key(doc["child"])) for doc in cursor}

    def count_nodes(self) -> int:
        self._require_connection()
        return self._db.collection(NODES).count()

    def count_edges(self) -> int:
        self._require_connection()
        return self._db.collection(EDGES).count()
