r"""
In-process fakes for the Neo4j and ArangoDB drivers.

The fakes understand exactly the statements the adapters issue and keep
a small graph in memory so round trips can be checked without servers.
"""

import re
from typing import Any

import pytest
from arango.exceptions import ArangoClientError, ServerConnectionError
from neo4j.exceptions import ServiceUnavailable

from tree_bench.adapters import document as document_module
from tree_bench.adapters import graph as graph_module


def _descendants(edges: list[tuple[str, str]], nodes: list[str], start: str, depth: int) -> list[str]:
    level = [start] if start in nodes else []
    for _ in range(depth):
        level = [child for node in level for parent, child in edges if parent == node]
    return level


# Neo4j


class FakeResult:
    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self._records = records or []

    def __iter__(self):
        return iter(self._records)

    def single(self) -> dict[str, Any] | None:
        return self._records[0] if self._records else None

    def consume(self) -> None:
        return None


class FakeGraphStore:
    def __init__(self) -> None:
        self.nodes: list[str] = []
        self.edges: list[tuple[str, str]] = []
        self.statements: list[tuple[str, dict[str, Any]]] = []
        self.rolled_back = 0
        self.committed = 0
        self.fail_after: int | None = None
        self.fail_rollback = False


class FakeTransaction:
    def __init__(self, store: FakeGraphStore) -> None:
        self._store = store
        self._nodes: list[str] = []
        self._edges: list[tuple[str, str]] = []
        self._runs = 0

    def run(self, query: str, **params: Any) -> FakeResult:
        self._store.statements.append((query, params))
        self._runs += 1
        if self._store.fail_after is not None and self._runs > self._store.fail_after:
            raise ServiceUnavailable("connection lost")

        if query == graph_module.CREATE_ROOT:
            self._nodes.append(params["id"])
        elif query == graph_module.CREATE_CHILD:
            # MATCH finds nothing when the parent does not exist.
            if params["parent_id"] in self._store.nodes + self._nodes:
                self._nodes.append(params["id"])
                self._edges.append((params["parent_id"], params["id"]))
        return FakeResult()

    def commit(self) -> None:
        self._store.nodes.extend(self._nodes)
        self._store.edges.extend(self._edges)
        self._store.committed += 1

    def rollback(self) -> None:
        if self._store.fail_rollback:
            raise ServiceUnavailable("rollback failed")
        self._store.rolled_back += 1


class FakeSession:
    def __init__(self, store: FakeGraphStore) -> None:
        self._store = store

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def begin_transaction(self) -> FakeTransaction:
        return FakeTransaction(self._store)

    def run(self, query: str, **params: Any) -> FakeResult:
        store = self._store
        store.statements.append((query, params))
        if "DETACH DELETE" in query:
            store.nodes.clear()
            store.edges.clear()
            return FakeResult()
        if "ORDER BY n.id LIMIT 1" in query:
            return FakeResult([{"id": min(store.nodes)}] if store.nodes else [])
        match = re.search(r"\[:CHILD\*(\d+)\.\.(\d+)\]", query)
        if match:
            depth = int(match.group(1))
            ids = _descendants(store.edges, store.nodes, params["root_id"], depth)
            return FakeResult([{"id": node_id} for node_id in ids])
        if "count(n)" in query:
            return FakeResult([{"count": len(store.nodes)}])
        if "count(r)" in query:
            return FakeResult([{"count": len(store.edges)}])
        if "RETURN p.id AS parent" in query:
            return FakeResult([{"parent": p, "child": c} for p, c in store.edges])
        if "RETURN n.id AS id" in query:
            return FakeResult([{"id": node_id} for node_id in store.nodes])
        msg = f"Unexpected query: {query}"
        raise AssertionError(msg)


class FakeNeo4jDriver:
    def __init__(self, store: FakeGraphStore, *, reachable: bool = True) -> None:
        self.store = store
        self.reachable = reachable
        self.closed = False
        self.databases: list[str | None] = []
        self.uri: str | None = None
        self.auth: tuple[str, str] | None = None

    def verify_connectivity(self) -> None:
        if not self.reachable:
            raise ServiceUnavailable("Unable to retrieve routing information")

    def session(self, database: str | None = None) -> FakeSession:
        self.databases.append(database)
        return FakeSession(self.store)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def neo4j_store() -> FakeGraphStore:
    return FakeGraphStore()


@pytest.fixture
def neo4j_driver(monkeypatch, neo4j_store) -> FakeNeo4jDriver:
    """Fake driver returned by GraphDatabase.driver inside the adapter."""
    driver = FakeNeo4jDriver(neo4j_store)

    class FakeGraphDatabase:
        @staticmethod
        def driver(uri: str, auth: tuple[str, str]) -> FakeNeo4jDriver:
            driver.uri = uri
            driver.auth = auth
            return driver

    monkeypatch.setattr("neo4j.GraphDatabase", FakeGraphDatabase)
    return driver


# ArangoDB


class FakeCollection:
    def __init__(self, name: str, *, edge: bool = False) -> None:
        self.name = name
        self.edge = edge
        self.docs: list[dict[str, Any]] = []
        self.fail_on_key: str | None = None

    def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        key = doc.get("_key")
        if key is not None and (key == self.fail_on_key or any(d.get("_key") == key for d in self.docs)):
            raise ArangoClientError(f"unique constraint violated - in index primary of type primary over '_key'; conflicting key: {key}")
        self.docs.append(dict(doc))
        return {"_key": key}

    def truncate(self) -> bool:
        self.docs.clear()
        return True

    def count(self) -> int:
        return len(self.docs)


class FakeAQL:
    def __init__(self, db: "FakeDatabase") -> None:
        self._db = db
        self.queries: list[tuple[str, dict[str, Any] | None]] = []

    def execute(self, query: str, bind_vars: dict[str, Any] | None = None):
        self.queries.append((query, bind_vars))
        keys = [doc["_key"] for doc in self._db.collections["Nodes"].docs]
        edges = [(doc["_from"], doc["_to"]) for doc in self._db.collections["Edges"].docs]

        if query == document_module.ROOT_QUERY:
            return iter(sorted(keys)[:1])
        if query == document_module.DESCENDANTS_QUERY:
            handles = [f"Nodes/{key}" for key in keys]
            found = _descendants(edges, handles, bind_vars["start"], bind_vars["depth"])
            return iter(handle.split("/", 1)[1] for handle in found)
        if query == document_module.NODE_KEYS_QUERY:
            return iter(keys)
        if query == document_module.EDGE_PAIRS_QUERY:
            return iter({"parent": p, "child": c} for p, c in edges)
        msg = f"Unexpected query: {query}"
        raise AssertionError(msg)


class FakeDatabase:
    def __init__(self, client: "FakeArangoClient", name: str) -> None:
        self._client = client
        self.name = name
        self.collections: dict[str, FakeCollection] = {}
        self.created_collections: list[tuple[str, bool]] = []
        self.aql = FakeAQL(self)

    def has_database(self, name: str) -> bool:
        return name in self._client.existing_databases

    def create_database(self, name: str) -> bool:
        self._client.existing_databases.add(name)
        self._client.created_databases.append(name)
        return True

    def has_collection(self, name: str) -> bool:
        return name in self.collections

    def create_collection(self, name: str, edge: bool = False) -> FakeCollection:
        self.collections[name] = FakeCollection(name, edge=edge)
        self.created_collections.append((name, edge))
        return self.collections[name]

    def collection(self, name: str) -> FakeCollection:
        return self.collections[name]


class FakeArangoClient:
    def __init__(self, *, reachable: bool = True) -> None:
        self.reachable = reachable
        self.hosts: str | None = None
        self.closed = False
        self.existing_databases: set[str] = {"_system"}
        self.created_databases: list[str] = []
        self._handles: dict[str, FakeDatabase] = {}

    def db(self, name: str, username: str = "root", password: str = "", verify: bool = False) -> FakeDatabase:
        if verify and not self.reachable:
            raise ServerConnectionError("bad connection: Connection refused")
        if name not in self._handles:
            self._handles[name] = FakeDatabase(self, name)
        return self._handles[name]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def arango_client(monkeypatch) -> FakeArangoClient:
    """Fake client returned by ArangoClient(hosts=...) inside the adapter."""
    client = FakeArangoClient()

    def factory(hosts: str) -> FakeArangoClient:
        client.hosts = hosts
        return client

    monkeypatch.setattr("arango.ArangoClient", factory)
    return client
