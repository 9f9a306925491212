"""Field discovery and value formatting for document pages."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from bson import json_util
from bson.objectid import ObjectId

from mongotui.db.models import Document

ID_FIELD = "_id"
FIELD_SCAN_LIMIT = 20
DEFAULT_VISIBLE_COUNT = 5

_JSON_OPTIONS = json_util.RELAXED_JSON_OPTIONS


def discover_fields(documents: Sequence[Document], schema_fields: Iterable[str] = ()) -> list[str]:
    """Union of keys in the first documents and the sampled schema.

    Names are sorted with ``_id`` always first.
    """
    names: set[str] = set(schema_fields)
    for doc in documents[:FIELD_SCAN_LIMIT]:
        names.update(doc.keys())
    ordered = sorted(names - {ID_FIELD})
    if ID_FIELD in names:
        ordered.insert(0, ID_FIELD)
    return ordered


def default_visible_fields(all_fields: Sequence[str]) -> list[str]:
    """``_id`` plus the next few fields in display order."""
    return list(all_fields[:DEFAULT_VISIBLE_COUNT])


def to_json(value: Any, *, indent: int | None = None) -> str:
    """Serialize a document or value as relaxed extended JSON."""
    return json_util.dumps(value, json_options=_JSON_OPTIONS, indent=indent)


def format_value(value: Any) -> str:
    """Single-line text for a table cell."""
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return to_json(value)


def document_id_text(doc: Document) -> str:
    if ID_FIELD not in doc:
        return ""
    return format_value(doc[ID_FIELD])
