"""Tree node data types for the database explorer."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from mongotui.db.models import DatabaseInfo


@dataclass(frozen=True)
class DatabaseNode:
    """Node representing a database; its collections are its children."""

    db_index: int
    name: str
    expanded: bool = False

    def get_label_text(self) -> str:
        return self.name


@dataclass(frozen=True)
class CollectionNode:
    """Node representing a collection inside an expanded database."""

    db_index: int
    coll_index: int
    name: str

    def get_label_text(self) -> str:
        return self.name


TreeNode = DatabaseNode | CollectionNode


def flatten_tree(databases: Sequence[DatabaseInfo], expanded: Collection[str]) -> list[TreeNode]:
    """Visible rows in display order: each database, then its collections if expanded."""
    rows: list[TreeNode] = []
    for db_index, db in enumerate(databases):
        is_expanded = db.name in expanded
        rows.append(DatabaseNode(db_index, db.name, is_expanded))
        if not is_expanded:
            continue
        for coll_index, coll in enumerate(db.collections):
            rows.append(CollectionNode(db_index, coll_index, coll.name))
    return rows
