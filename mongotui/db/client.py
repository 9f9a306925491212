"""Remote-store client: the only code that talks to MongoDB.

Every method here blocks; callers run them off the UI thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import ConfigurationError, ConnectionFailure, PyMongoError

from mongotui.core.errors import ConnectionFailedError, NotConnectedError, StoreError
from mongotui.db.models import DatabaseInfo, Document

logger = logging.getLogger(__name__)

DEFAULT_SERVER_SELECTION_TIMEOUT_MS = 5000


class RemoteStore(Protocol):
    """Operations the application needs from a document store."""

    def connect(self, uri: str) -> None: ...

    def list_databases(self) -> list[DatabaseInfo]: ...

    def find_documents(
        self,
        db: str,
        collection: str,
        *,
        filter: Mapping[str, Any] | None = None,
        projection: Mapping[str, Any] | None = None,
        sort: Mapping[str, Any] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Document]: ...

    def count_documents(
        self,
        db: str,
        collection: str,
        filter: Mapping[str, Any] | None = None,
    ) -> int: ...

    def sample_schema(self, db: str, collection: str) -> list[str]: ...


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver exceptions into StoreError subclasses."""
    try:
        yield
    except StoreError:
        raise
    except (ConfigurationError, ConnectionFailure) as exc:
        raise ConnectionFailedError(f"{operation} failed: {exc}") from exc
    except PyMongoError as exc:
        raise StoreError(f"{operation} failed: {exc}") from exc


def sort_spec(sort: Mapping[str, Any]) -> list[tuple[str, int]]:
    """Convert a sort document into pymongo's list-of-pairs form."""
    spec: list[tuple[str, int]] = []
    for key, direction in sort.items():
        try:
            spec.append((key, ASCENDING if int(direction) >= 0 else DESCENDING))
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Invalid sort direction for '{key}': {direction!r}") from exc
    return spec


class MongoStore:
    """RemoteStore backed by a single pymongo client.

    ``connect`` replaces the live client; the previous one is closed.
    """

    def __init__(self, server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS) -> None:
        self._lock = threading.Lock()
        self._client: MongoClient | None = None
        self._timeout_ms = server_selection_timeout_ms

    def _require_client(self) -> MongoClient:
        with self._lock:
            client = self._client
        if client is None:
            raise NotConnectedError()
        return client

    def connect(self, uri: str) -> None:
        with _store_errors("Connect"):
            client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=self._timeout_ms)
            try:
                # Trigger server selection to validate the connection
                client.admin.command("ping")
            except PyMongoError:
                client.close()
                raise
        with self._lock:
            previous, self._client = self._client, client
        if previous is not None:
            previous.close()
        logger.info("Connected to %s", client.address)

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()

    def list_databases(self) -> list[DatabaseInfo]:
        client = self._require_client()
        databases: list[DatabaseInfo] = []
        with _store_errors("Listing databases"):
            for db_name in client.list_database_names():
                names = sorted(client[db_name].list_collection_names())
                databases.append(DatabaseInfo.from_names(db_name, names))
        return databases

    def find_documents(
        self,
        db: str,
        collection: str,
        *,
        filter: Mapping[str, Any] | None = None,
        projection: Mapping[str, Any] | None = None,
        sort: Mapping[str, Any] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Document]:
        client = self._require_client()
        with _store_errors("Find"):
            cursor = client[db][collection].find(dict(filter or {}), projection)
            if sort:
                cursor = cursor.sort(sort_spec(sort))
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return list(cursor)

    def count_documents(
        self,
        db: str,
        collection: str,
        filter: Mapping[str, Any] | None = None,
    ) -> int:
        client = self._require_client()
        with _store_errors("Count"):
            return int(client[db][collection].count_documents(dict(filter or {})))

    def sample_schema(self, db: str, collection: str) -> list[str]:
        client = self._require_client()
        with _store_errors("Schema sampling"):
            cursor = client[db][collection].aggregate([{"$sample": {"size": 1}}])
            for doc in cursor:
                return list(doc.keys())
        return []
