"""
Fake Motor client for testing.

FakeMotorClient mirrors the slice of the Motor API the document layer uses
(admin ping, database/collection lookup, inserts, simple finds, index
creation) and keeps everything in memory, so document tests run without a
MongoDB server.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError


def _lookup(document: Dict[str, Any], dotted: str) -> Any:
    value: Any = document
    for part in dotted.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _matches(document: Dict[str, Any], filter: Dict[str, Any]) -> bool:
    # Equality only; enough for the handles under test
    return all(_lookup(document, key) == expected for key, expected in filter.items())


@dataclass
class InsertOneResult:
    inserted_id: Any


@dataclass
class InsertManyResult:
    inserted_ids: List[Any]


class FakeCursor:
    """Async cursor over a snapshot of matching documents."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents
        self._limit = 0
        self.sort_spec: Optional[List[tuple]] = None

    def sort(self, spec: List[tuple]) -> "FakeCursor":
        self.sort_spec = list(spec)
        # Stable sort, least significant key first
        for key, direction in reversed(self.sort_spec):
            self._documents.sort(key=lambda doc: _lookup(doc, key), reverse=direction < 0)
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        documents = self._documents
        if self._limit:
            documents = documents[: self._limit]
        if length is not None:
            documents = documents[:length]
        return [dict(doc) for doc in documents]


class FakeCollection:
    """In-memory collection."""

    def __init__(self, name: str):
        self.name = name
        self.documents: List[Dict[str, Any]] = []
        self.indexes: Dict[str, Dict[str, Any]] = {}

    def _store(self, document: Dict[str, Any]) -> Any:
        stored = dict(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return stored["_id"]

    async def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        return InsertOneResult(inserted_id=self._store(document))

    async def insert_many(self, documents: List[Dict[str, Any]]) -> InsertManyResult:
        return InsertManyResult(inserted_ids=[self._store(doc) for doc in documents])

    async def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for document in self.documents:
            if _matches(document, filter):
                return dict(document)
        return None

    def find(self, filter: Dict[str, Any]) -> FakeCursor:
        return FakeCursor([doc for doc in self.documents if _matches(doc, filter)])

    async def count_documents(self, filter: Dict[str, Any]) -> int:
        return sum(1 for doc in self.documents if _matches(doc, filter))

    async def create_indexes(self, models: List[Any]) -> List[str]:
        names = []
        for model in models:
            spec = dict(model.document)
            self.indexes[spec["name"]] = spec
            names.append(spec["name"])
        return names


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeAdmin:
    def __init__(self, client: "FakeMotorClient"):
        self._client = client
        self.commands: List[str] = []

    async def command(self, name: str) -> Dict[str, Any]:
        self.commands.append(name)
        # Yield so concurrent callers interleave as with a real round trip
        await asyncio.sleep(0)
        if self._client.fail_ping:
            raise ServerSelectionTimeoutError("No servers found yet")
        return {"ok": 1.0}


class FakeMotorClient:
    """Stand-in for ``AsyncIOMotorClient``."""

    def __init__(self, uri: str, fail_ping: bool = False, **options: Any):
        self.uri = uri
        self.options = options
        self.fail_ping = fail_ping
        self.closed = False
        self.admin = FakeAdmin(self)
        self.databases: Dict[str, FakeDatabase] = {}

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeClientFactory:
    """Records every client built; ``fail_ping`` makes new clients unreachable."""

    fail_ping: bool = False
    clients: List[FakeMotorClient] = field(default_factory=list)

    def __call__(self, uri: str, **options: Any) -> FakeMotorClient:
        client = FakeMotorClient(uri, fail_ping=self.fail_ping, **options)
        self.clients.append(client)
        return client

    @property
    def last(self) -> FakeMotorClient:
        return self.clients[-1]
