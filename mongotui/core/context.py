"""Shared mutable state visible to every pane and popup.

The viewer owns exactly one Context. Panes receive it for the duration of a
single key event or action and must not keep a reference to it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from mongotui.core.text_buffer import TextBuffer
from mongotui.db.models import CollectionInfo, DatabaseInfo, Document
from mongotui.domains.connections.domain.config import Connection

DEFAULT_LIMIT = 20


class QueryField(Enum):
    """The four independent buffers that make up a query request."""

    FILTER = "filter"
    SORT = "sort"
    PROJECTION = "projection"
    LIMIT = "limit"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def next(self) -> QueryField:
        """Tab order: Filter, Sort, Projection, Limit, then wrap."""
        order = QUERY_FIELD_ORDER
        return order[(order.index(self) + 1) % len(order)]


QUERY_FIELD_ORDER: tuple[QueryField, ...] = (
    QueryField.FILTER,
    QueryField.SORT,
    QueryField.PROJECTION,
    QueryField.LIMIT,
)


def _default_query_inputs(default_limit: int = DEFAULT_LIMIT) -> dict[QueryField, TextBuffer]:
    return {
        QueryField.FILTER: TextBuffer(placeholder="{}"),
        QueryField.SORT: TextBuffer(placeholder="{}"),
        QueryField.PROJECTION: TextBuffer(placeholder="{}"),
        QueryField.LIMIT: TextBuffer(placeholder=str(default_limit)),
    }


@dataclass
class PaginationState:
    current_page: int = 0
    total_count: int | None = None

    def reset(self) -> None:
        self.current_page = 0
        self.total_count = None


@dataclass
class Context:
    connections: list[Connection] = field(default_factory=list)
    databases: list[DatabaseInfo] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)

    selected_connection: int | None = None
    selected_db_index: int | None = None
    selected_coll_index: int | None = None

    default_limit: int = DEFAULT_LIMIT
    query_inputs: dict[QueryField, TextBuffer] = field(default_factory=_default_query_inputs)
    input_validation_errors: dict[QueryField, str] = field(default_factory=dict)
    pagination: PaginationState = field(default_factory=PaginationState)

    # Field names sampled from the selected collection, if any.
    schema_fields: list[str] = field(default_factory=list)

    is_loading: bool = False
    loading_frame: int = 0

    clipboard: Callable[[str], None] | None = None

    def __post_init__(self) -> None:
        limit_buffer = self.query_inputs.get(QueryField.LIMIT)
        if limit_buffer is not None:
            limit_buffer.placeholder = str(self.default_limit)

    def buffer_text(self, query_field: QueryField) -> str:
        return self.query_inputs[query_field].text

    def selected_connection_info(self) -> Connection | None:
        idx = self.selected_connection
        if idx is None or not 0 <= idx < len(self.connections):
            return None
        return self.connections[idx]

    def selected_database(self) -> DatabaseInfo | None:
        idx = self.selected_db_index
        if idx is None or not 0 <= idx < len(self.databases):
            return None
        return self.databases[idx]

    def selected_collection(self) -> CollectionInfo | None:
        """The selected collection, only if both indices are in bounds."""
        db = self.selected_database()
        idx = self.selected_coll_index
        if db is None or idx is None or not 0 <= idx < len(db.collections):
            return None
        return db.collections[idx]

    def selected_namespace(self) -> tuple[str, str] | None:
        db = self.selected_database()
        coll = self.selected_collection()
        if db is None or coll is None:
            return None
        return db.name, coll.name

    def copy_to_clipboard(self, text: str) -> bool:
        if self.clipboard is None:
            return False
        self.clipboard(text)
        return True
