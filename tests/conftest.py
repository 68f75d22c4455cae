"""Shared pytest fixtures.

The application talks to MongoDB through pymongo's async API. Tests swap in a small
in-memory double of that API so the full HTTP stack runs without a server and every
store call can be counted.
"""

import copy
from collections.abc import Callable, Iterator
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from mflix.app import App
from mflix.config import Config
from mflix.web.server import create_fastapi_app


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, collection: "FakeCollection", query: dict[str, Any]) -> None:
        self._collection = collection
        self._query = query
        self._skip = 0
        self._limit = 0

    def skip(self, count: int) -> "FakeCursor":
        self._skip = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def __aiter__(self):
        self._collection.record("find")
        docs = [d for d in self._collection.docs if _matches(d, self._query)][self._skip :]
        if self._limit:
            docs = docs[: self._limit]
        for doc in docs:
            yield copy.deepcopy(doc)


class FakeCollection:
    """Subset of AsyncCollection used by the services."""

    def __init__(self, name: str, calls: list[tuple[str, str]]) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None
        self._calls = calls

    def record(self, operation: str) -> None:
        self._calls.append((self.name, operation))
        if self.fail_with is not None:
            raise self.fail_with

    async def create_index(self, keys: list[tuple[str, int]], **options: Any) -> str:
        self.indexes.append({"keys": keys, **options})
        return "_".join(f"{field}_{direction}" for field, direction in keys)

    def find(self, query: dict[str, Any]) -> FakeCursor:
        return FakeCursor(self, query)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        self.record("find_one")
        doc = next((d for d in self.docs if _matches(d, query)), None)
        return copy.deepcopy(doc)

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self.record("insert_one")
        doc.setdefault("_id", ObjectId())
        for index in self.indexes:
            if not index.get("unique"):
                continue
            fields = [field for field, _ in index["keys"]]
            if any(all(d.get(f) == doc.get(f) for f in fields) for d in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name}", code=11000)
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        self.record("update_one")
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        self.record("delete_one")
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self, name: str, calls: list[tuple[str, str]]) -> None:
        self.name = name
        self._calls = calls
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self._calls)
        return self._collections[name]


class FakeMongoClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.closed = False
        self._databases: dict[str, FakeDatabase] = {}

    def get_database(self, name: str) -> FakeDatabase:
        if name not in self._databases:
            self._databases[name] = FakeDatabase(name, self.calls)
        return self._databases[name]

    def collection(self, database: str, name: str) -> FakeCollection:
        return self.get_database(database).get_collection(name)

    def reset_calls(self) -> None:
        self.calls.clear()

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="mongodb://localhost:27017",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def mongo() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
def app_instance(config: Config, mongo: FakeMongoClient) -> App:
    return App(config, mongo_client=mongo)  # type: ignore[arg-type]


@pytest.fixture
def client(app_instance: App, config: Config, mongo: FakeMongoClient) -> Iterator[TestClient]:
    with TestClient(create_fastapi_app(app_instance, config)) as test_client:
        mongo.reset_calls()
        yield test_client


@pytest.fixture
def login(client: TestClient) -> Callable[[str, str], str]:
    """Register (if needed) and log in, returning the bearer token."""

    def _login(email: str = "user@example.com", password: str = "secret") -> str:
        client.post("/api/auth/register", json={"email": email, "password": password})
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return str(response.json()["data"]["token"])

    return _login


@pytest.fixture
def auth_headers(login: Callable[[str, str], str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {login()}"}
