"""Remote-store access for mongotui."""

from .client import MongoStore, RemoteStore
from .models import CollectionInfo, DatabaseInfo, Document

__all__ = [
    "CollectionInfo",
    "DatabaseInfo",
    "Document",
    "MongoStore",
    "RemoteStore",
]
