"""Tests for the pymongo-backed store, with the driver client replaced."""

from __future__ import annotations

import pytest
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from mongotui.core.errors import ConnectionFailedError, NotConnectedError, StoreError
from mongotui.db import client as client_module
from mongotui.db.client import MongoStore, sort_spec


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)
        self.calls = []

    def sort(self, spec):
        self.calls.append(("sort", spec))
        return self

    def skip(self, n):
        self.calls.append(("skip", n))
        return self

    def limit(self, n):
        self.calls.append(("limit", n))
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    def __init__(self, docs):
        self.docs = docs
        self.last_cursor = None

    def find(self, filter, projection=None):
        self.last_cursor = FakeCursor(self.docs)
        return self.last_cursor

    def count_documents(self, filter):
        return len(self.docs)

    def aggregate(self, pipeline):
        return iter(self.docs[:1])


class FakeDatabase:
    def __init__(self, collections):
        self.collections = collections

    def __getitem__(self, name):
        return self.collections[name]

    def list_collection_names(self):
        return list(self.collections)


class FakeAdmin:
    def __init__(self, error=None):
        self.error = error

    def command(self, name):
        if self.error is not None:
            raise self.error
        return {"ok": 1}


class FakeMongoClient:
    instances: list[FakeMongoClient] = []
    ping_error: Exception | None = None

    def __init__(self, uri, serverSelectionTimeoutMS=None):
        self.uri = uri
        self.timeout = serverSelectionTimeoutMS
        self.closed = False
        self.address = ("localhost", 27017)
        self.admin = FakeAdmin(FakeMongoClient.ping_error)
        self.databases = {
            "shop": FakeDatabase({"orders": FakeCollection([{"_id": 1, "total": 5}]), "carts": FakeCollection([])}),
        }
        FakeMongoClient.instances.append(self)

    def __getitem__(self, name):
        return self.databases[name]

    def list_database_names(self):
        return list(self.databases)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    FakeMongoClient.instances = []
    FakeMongoClient.ping_error = None
    monkeypatch.setattr(client_module, "MongoClient", FakeMongoClient)
    return FakeMongoClient


def test_sort_spec_maps_directions():
    assert sort_spec({"a": 1, "b": -1}) == [("a", ASCENDING), ("b", DESCENDING)]


def test_sort_spec_rejects_garbage():
    with pytest.raises(StoreError):
        sort_spec({"a": "up"})


class TestMongoStore:
    def test_operations_need_a_connection(self):
        store = MongoStore()
        with pytest.raises(NotConnectedError):
            store.list_databases()

    def test_connect_pings_with_timeout(self, fake_client):
        store = MongoStore(server_selection_timeout_ms=1234)
        store.connect("mongodb://localhost")
        assert fake_client.instances[0].timeout == 1234

    def test_reconnect_closes_previous_client(self, fake_client):
        store = MongoStore()
        store.connect("mongodb://one")
        store.connect("mongodb://two")
        first, second = fake_client.instances
        assert first.closed is True
        assert second.closed is False

    def test_failed_ping_raises_connection_error(self, fake_client):
        fake_client.ping_error = ServerSelectionTimeoutError("no servers")
        store = MongoStore()
        with pytest.raises(ConnectionFailedError):
            store.connect("mongodb://nowhere")
        assert fake_client.instances[0].closed is True
        with pytest.raises(NotConnectedError):
            store.count_documents("shop", "orders")

    def test_list_databases_sorts_collections(self, fake_client):
        store = MongoStore()
        store.connect("mongodb://localhost")
        [shop] = store.list_databases()
        assert shop.name == "shop"
        assert [c.name for c in shop.collections] == ["carts", "orders"]

    def test_find_applies_sort_skip_limit(self, fake_client):
        store = MongoStore()
        store.connect("mongodb://localhost")
        docs = store.find_documents("shop", "orders", sort={"total": -1}, skip=10, limit=5)
        cursor = fake_client.instances[0]["shop"]["orders"].last_cursor
        assert docs == [{"_id": 1, "total": 5}]
        assert cursor.calls == [("sort", [("total", DESCENDING)]), ("skip", 10), ("limit", 5)]

    def test_count_and_schema(self, fake_client):
        store = MongoStore()
        store.connect("mongodb://localhost")
        assert store.count_documents("shop", "orders") == 1
        assert store.sample_schema("shop", "orders") == ["_id", "total"]
        assert store.sample_schema("shop", "carts") == []

    def test_driver_errors_become_store_errors(self, fake_client, monkeypatch):
        store = MongoStore()
        store.connect("mongodb://localhost")

        def boom(filter):
            raise OperationFailure("unauthorized")

        monkeypatch.setattr(fake_client.instances[0]["shop"]["orders"], "count_documents", boom)
        with pytest.raises(StoreError, match="Count failed"):
            store.count_documents("shop", "orders")
