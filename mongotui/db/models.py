"""Metadata types returned by the remote store."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# A document is whatever mapping the driver hands back; only its keys and
# the ``_id`` entry are ever interpreted.
Document = Mapping[str, Any]


@dataclass(frozen=True)
class CollectionInfo:
    name: str


@dataclass(frozen=True)
class DatabaseInfo:
    name: str
    collections: tuple[CollectionInfo, ...] = field(default_factory=tuple)

    @classmethod
    def from_names(cls, name: str, collection_names: list[str]) -> DatabaseInfo:
        return cls(name=name, collections=tuple(CollectionInfo(c) for c in collection_names))
