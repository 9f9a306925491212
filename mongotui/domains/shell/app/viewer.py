"""The application state machine.

``MongoViewer`` owns the Context, the pane registry and the popup slot. It
turns keys into actions and applies actions to state. It never draws and
never blocks: store calls are handed to the BackgroundRunner and come back
later as actions on the loop's channel.
"""

from __future__ import annotations

import asyncio
import logging
import math

from mongotui.core.actions import (
    OPEN_POPUP_ACTIONS,
    Action,
    ClosePopup,
    Connect,
    DatabasesLoaded,
    DeleteConnection,
    DocumentsLoaded,
    Error,
    Help,
    NextPage,
    OpenConnectionManager,
    OpenFieldSelector,
    OpenJsonPopup,
    OpenQueryBuilder,
    PreviousPage,
    Quit,
    RefreshDatabases,
    RefreshDocuments,
    Render,
    Resize,
    SaveConnection,
    SchemaLoaded,
    SelectCollection,
    SelectDatabase,
    Tick,
)
from mongotui.core.context import Context
from mongotui.core.errors import QueryValidationError, describe_error
from mongotui.core.keys import KeyEvent
from mongotui.core.pane_id import PaneId
from mongotui.core.registry import PaneRegistry
from mongotui.db.client import RemoteStore
from mongotui.domains.connections.domain.config import Connection
from mongotui.domains.connections.ui.pane import ConnectionsPane
from mongotui.domains.documents.ui.pane import DocumentsPane
from mongotui.domains.explorer.ui.pane import DatabasesPane
from mongotui.domains.query.app.validation import FindRequest, build_find_request, current_limit
from mongotui.domains.query.ui.pane import QueryPane
from mongotui.domains.shell.app.orchestrator import BackgroundRunner, run_blocking
from mongotui.domains.shell.state.popups import (
    ConnectionEditorPopup,
    ErrorPopup,
    FieldSelectorPopup,
    HelpPopup,
    JsonViewerPopup,
    Popup,
    QueryBuilderPopup,
)

logger = logging.getLogger(__name__)

GLOBAL_SHORTCUTS: list[tuple[str, str]] = [
    ("q", "Quit"),
    ("ctrl+c", "Quit (always)"),
    ("?", "Help"),
    ("tab", "Next pane"),
    ("1-4", "Jump to pane"),
]


class MongoViewer:
    """Dispatches keys and actions over the four panes and the popup slot."""

    def __init__(self, store: RemoteStore, runner: BackgroundRunner, ctx: Context | None = None) -> None:
        self.store = store
        self.runner = runner
        self.ctx = ctx if ctx is not None else Context()
        self.popup: Popup | None = None
        self.size: tuple[int, int] | None = None
        # Only the newest document fetch may update the Context.
        self.document_generation = 0

        self.registry = PaneRegistry()
        self.connections_pane = ConnectionsPane()
        self.databases_pane = DatabasesPane()
        self.query_pane = QueryPane()
        self.documents_pane = DocumentsPane()
        self.conn_pane_id = self.registry.register(self.connections_pane)
        self.db_pane_id = self.registry.register(self.databases_pane)
        self.query_pane_id = self.registry.register(self.query_pane)
        self.doc_pane_id = self.registry.register(self.documents_pane)

        if self.ctx.connections and self.ctx.selected_connection is None:
            self.ctx.selected_connection = 0

    @property
    def pane_ids(self) -> list[PaneId]:
        return [self.conn_pane_id, self.db_pane_id, self.query_pane_id, self.doc_pane_id]

    def help_rows(self) -> list[tuple[str, str]]:
        return GLOBAL_SHORTCUTS + self.registry.all_shortcuts()

    # Key routing

    def handle_key_event(self, key: KeyEvent) -> Action | None:
        """Translate one key press into at most one action."""
        if key.matches("ctrl+c"):
            return Quit()

        if self.popup is not None:
            self.popup, action = self.popup.handle_key(key, self.ctx)
            return action if action is not None else Render()

        if key.matches("q"):
            return Quit()
        if key.matches("?"):
            return self._intercept(Help())
        if key.matches("tab"):
            self.registry.cycle_next()
            return Render()
        for number, pane_id in enumerate(self.pane_ids, start=1):
            if key.matches(str(number)):
                self.registry.set_active(pane_id)
                return Render()

        return self._intercept(self.registry.handle_key_event(key, self.ctx))

    def _intercept(self, action: Action | None) -> Action | None:
        if isinstance(action, OPEN_POPUP_ACTIONS):
            self._open_popup(action)
            return Render()
        return action

    def _open_popup(self, action: Action) -> None:
        if isinstance(action, Help):
            self.popup = HelpPopup(rows=self.help_rows())
        elif isinstance(action, OpenJsonPopup):
            self.popup = JsonViewerPopup(content=action.content, title=action.title)
        elif isinstance(action, OpenConnectionManager):
            self.popup = ConnectionEditorPopup()
        elif isinstance(action, OpenQueryBuilder):
            self.popup = QueryBuilderPopup()
        elif isinstance(action, OpenFieldSelector):
            self.popup = FieldSelectorPopup(
                all_fields=list(action.all_fields),
                visible_fields=list(action.visible_fields),
            )

    # Action handling

    def is_stale(self, action: Action) -> bool:
        """True for document results belonging to a superseded request."""
        if isinstance(action, DocumentsLoaded):
            return action.generation != self.document_generation
        if isinstance(action, Error) and action.generation is not None:
            return action.generation != self.document_generation
        return False

    def update(self, action: Action) -> Action | None:
        """Apply one action, broadcast it to every pane, return any follow-up."""
        if self.is_stale(action):
            logger.info(
                "Dropping stale %s (generation %s, current %s)",
                type(action).__name__,
                getattr(action, "generation", None),
                self.document_generation,
            )
            return None
        follow_up = self._apply(action)
        self.registry.broadcast(action, self.ctx)
        return follow_up

    def _apply(self, action: Action) -> Action | None:
        ctx = self.ctx

        if isinstance(action, (Tick, Render, Quit)):
            if isinstance(action, Tick) and ctx.is_loading:
                ctx.loading_frame += 1
            return None
        if isinstance(action, Resize):
            self.size = (action.width, action.height)
            return Render()

        if isinstance(action, OPEN_POPUP_ACTIONS):
            self._open_popup(action)
            return None
        if isinstance(action, ClosePopup):
            self.popup = None
            return None
        if isinstance(action, Error):
            logger.error("Error: %s", action.message)
            ctx.is_loading = False
            self.popup = ErrorPopup(action.message)
            return None

        if isinstance(action, SaveConnection):
            ctx.connections.append(Connection(name=action.name, uri=action.uri))
            ctx.selected_connection = len(ctx.connections) - 1
            return None
        if isinstance(action, DeleteConnection):
            return self._delete_connection(action.index)

        if isinstance(action, Connect):
            return self._connect(action.uri)
        if isinstance(action, RefreshDatabases):
            return self._refresh_databases()
        if isinstance(action, DatabasesLoaded):
            return self._databases_loaded(action)
        if isinstance(action, SelectDatabase):
            return self._select_database(action.index)
        if isinstance(action, SelectCollection):
            return self._select_collection(action.db_index, action.coll_index)
        if isinstance(action, SchemaLoaded):
            if ctx.selected_namespace() == (action.db, action.collection):
                ctx.schema_fields = list(action.fields)
            return None

        if isinstance(action, RefreshDocuments):
            return self._refresh_documents()
        if isinstance(action, DocumentsLoaded):
            ctx.documents = list(action.documents)
            ctx.pagination.total_count = action.total_count
            ctx.is_loading = False
            self.registry.set_active(self.doc_pane_id)
            return None
        if isinstance(action, NextPage):
            return self._next_page()
        if isinstance(action, PreviousPage):
            if ctx.pagination.current_page == 0 or current_limit(ctx) is None:
                return None
            ctx.pagination.current_page -= 1
            return RefreshDocuments()

        # ToggleViewMode and UpdateVisibleFields only concern the panes.
        return None

    def _delete_connection(self, index: int) -> Action | None:
        ctx = self.ctx
        if not 0 <= index < len(ctx.connections):
            logger.debug("Ignoring delete of missing connection %d", index)
            return None
        removed = ctx.connections.pop(index)
        logger.info("Removed connection %s", removed.name)
        if not ctx.connections:
            ctx.selected_connection = None
        elif ctx.selected_connection is not None and ctx.selected_connection >= len(ctx.connections):
            ctx.selected_connection = len(ctx.connections) - 1
        return None

    def _connect(self, uri: str) -> Action | None:
        self.ctx.is_loading = True
        store = self.store

        async def work() -> Action:
            await run_blocking(store.connect, uri)
            return RefreshDatabases()

        self.runner.spawn("connect", work, lambda exc: Error(describe_error(exc)))
        return None

    def _refresh_databases(self) -> Action | None:
        self.ctx.is_loading = True
        store = self.store

        async def work() -> Action:
            databases = await run_blocking(store.list_databases)
            return DatabasesLoaded(tuple(databases))

        self.runner.spawn("list-databases", work, lambda exc: Error(describe_error(exc)))
        return None

    def _databases_loaded(self, action: DatabasesLoaded) -> Action | None:
        ctx = self.ctx
        ctx.databases = list(action.databases)
        ctx.is_loading = False
        if ctx.selected_database() is None:
            ctx.selected_db_index = None
            ctx.selected_coll_index = None
        elif ctx.selected_collection() is None:
            ctx.selected_coll_index = None
        self.registry.set_active(self.db_pane_id)
        return None

    def _select_database(self, index: int) -> Action | None:
        ctx = self.ctx
        if not 0 <= index < len(ctx.databases):
            logger.debug("Ignoring selection of missing database %d", index)
            return None
        if ctx.selected_db_index != index:
            ctx.selected_db_index = index
            ctx.selected_coll_index = None
        return None

    def _select_collection(self, db_index: int, coll_index: int) -> Action | None:
        ctx = self.ctx
        if not 0 <= db_index < len(ctx.databases):
            logger.debug("Ignoring selection in missing database %d", db_index)
            return None
        db = ctx.databases[db_index]
        if not 0 <= coll_index < len(db.collections):
            logger.debug("Ignoring selection of missing collection %d in %s", coll_index, db.name)
            return None
        ctx.selected_db_index = db_index
        ctx.selected_coll_index = coll_index
        ctx.pagination.reset()
        ctx.schema_fields = []
        self._sample_schema(db.name, db.collections[coll_index].name)
        return RefreshDocuments()

    def _sample_schema(self, db: str, collection: str) -> None:
        store = self.store

        async def work() -> Action:
            fields = await run_blocking(store.sample_schema, db, collection)
            return SchemaLoaded(db, collection, tuple(fields))

        def on_error(exc: Exception) -> None:
            logger.warning("Schema sampling for %s.%s failed: %s", db, collection, exc)
            return None

        self.runner.spawn(f"sample-schema-{db}.{collection}", work, on_error)

    def _refresh_documents(self) -> Action | None:
        ctx = self.ctx
        try:
            request = build_find_request(ctx)
        except QueryValidationError as exc:
            ctx.input_validation_errors[exc.field] = exc.message
            return Error(str(exc))
        except ValueError:
            return Error("Select a collection first")

        self.document_generation += 1
        generation = self.document_generation
        ctx.is_loading = True
        logger.debug(
            "Fetching %s.%s skip=%d limit=%d (generation %d)",
            request.db,
            request.collection,
            request.skip,
            request.limit,
            generation,
        )

        self.runner.spawn(
            f"refresh-documents-{generation}",
            lambda: self._fetch_page(request, generation),
            lambda exc: Error(describe_error(exc), generation),
        )
        return None

    async def _fetch_page(self, request: FindRequest, generation: int) -> Action:
        store = self.store
        documents, total = await asyncio.gather(
            run_blocking(
                store.find_documents,
                request.db,
                request.collection,
                filter=request.filter,
                projection=request.projection,
                sort=request.sort,
                limit=request.limit,
                skip=request.skip,
            ),
            run_blocking(store.count_documents, request.db, request.collection, request.filter),
        )
        return DocumentsLoaded(tuple(documents), int(total), generation)

    def _next_page(self) -> Action | None:
        ctx = self.ctx
        total = ctx.pagination.total_count
        limit = current_limit(ctx)
        if total is None or limit is None:
            logger.debug("Next page unavailable: total=%s limit=%s", total, limit)
            return None
        last_page = max(math.ceil(total / limit), 1) - 1
        if ctx.pagination.current_page >= last_page:
            return None
        ctx.pagination.current_page += 1
        return RefreshDocuments()
