"""The closed set of actions that drive every state change.

User intents (``Connect``, ``SelectCollection``, ``NextPage``) and
background results (``DatabasesLoaded``, ``DocumentsLoaded``, ``Error``) share
this one vocabulary so they flow through the same dispatch path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from mongotui.db.models import DatabaseInfo, Document


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Render:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Error:
    """A failure to show the user.

    ``generation`` is set for document fetches so an error from a superseded
    request can be dropped.
    """

    message: str
    generation: int | None = None


@dataclass(frozen=True)
class Connect:
    uri: str


@dataclass(frozen=True)
class SelectDatabase:
    index: int


@dataclass(frozen=True)
class SelectCollection:
    db_index: int
    coll_index: int


@dataclass(frozen=True)
class RefreshDatabases:
    pass


@dataclass(frozen=True)
class RefreshDocuments:
    pass


@dataclass(frozen=True)
class NextPage:
    pass


@dataclass(frozen=True)
class PreviousPage:
    pass


@dataclass(frozen=True)
class ToggleViewMode:
    pass


@dataclass(frozen=True)
class OpenJsonPopup:
    content: str
    title: str


@dataclass(frozen=True)
class OpenConnectionManager:
    pass


@dataclass(frozen=True)
class OpenQueryBuilder:
    pass


@dataclass(frozen=True)
class OpenFieldSelector:
    all_fields: tuple[str, ...]
    visible_fields: tuple[str, ...]


@dataclass(frozen=True)
class ClosePopup:
    pass


@dataclass(frozen=True)
class SaveConnection:
    name: str
    uri: str


@dataclass(frozen=True)
class DeleteConnection:
    index: int


@dataclass(frozen=True)
class UpdateVisibleFields:
    fields: tuple[str, ...]


@dataclass(frozen=True)
class DatabasesLoaded:
    databases: tuple[DatabaseInfo, ...]


@dataclass(frozen=True)
class DocumentsLoaded:
    documents: tuple[Document, ...] = field(hash=False)
    total_count: int
    generation: int = 0


@dataclass(frozen=True)
class SchemaLoaded:
    db: str
    collection: str
    fields: tuple[str, ...]


Action = Union[
    Tick,
    Render,
    Resize,
    Quit,
    Help,
    Error,
    Connect,
    SelectDatabase,
    SelectCollection,
    RefreshDatabases,
    RefreshDocuments,
    NextPage,
    PreviousPage,
    ToggleViewMode,
    OpenJsonPopup,
    OpenConnectionManager,
    OpenQueryBuilder,
    OpenFieldSelector,
    ClosePopup,
    SaveConnection,
    DeleteConnection,
    UpdateVisibleFields,
    DatabasesLoaded,
    DocumentsLoaded,
    SchemaLoaded,
]

# Actions that open a popup; the viewer intercepts these from pane input.
OPEN_POPUP_ACTIONS = (
    Help,
    OpenJsonPopup,
    OpenConnectionManager,
    OpenQueryBuilder,
    OpenFieldSelector,
)
