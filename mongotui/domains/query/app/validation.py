"""Turn the query builder's raw text buffers into a find request."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bson import json_util
from bson.errors import BSONError

from mongotui.core.context import QUERY_FIELD_ORDER, Context, QueryField
from mongotui.core.errors import QueryValidationError


@dataclass(frozen=True)
class FindRequest:
    """Everything one page fetch needs, detached from the Context."""

    db: str
    collection: str
    filter: Mapping[str, Any] | None
    sort: Mapping[str, Any] | None
    projection: Mapping[str, Any] | None
    limit: int
    skip: int


def parse_document(field: QueryField, text: str) -> Mapping[str, Any] | None:
    """Parse an extended-JSON object literal. Blank text means no document."""
    text = text.strip()
    if not text:
        return None
    try:
        value = json_util.loads(text)
    except (ValueError, TypeError, ArithmeticError, BSONError) as exc:
        raise QueryValidationError(field, f"invalid JSON ({exc})") from exc
    if not isinstance(value, Mapping):
        raise QueryValidationError(field, "expected a JSON object")
    return value


def parse_limit(text: str, default: int) -> int:
    text = text.strip()
    if not text:
        return default
    try:
        limit = int(text)
    except ValueError as exc:
        raise QueryValidationError(QueryField.LIMIT, f"'{text}' is not a number") from exc
    if limit <= 0:
        raise QueryValidationError(QueryField.LIMIT, "must be greater than zero")
    return limit


def validate_field(ctx: Context, field: QueryField) -> None:
    """Raise QueryValidationError if ``field``'s buffer does not parse."""
    text = ctx.buffer_text(field)
    if field is QueryField.LIMIT:
        parse_limit(text, ctx.default_limit)
    else:
        parse_document(field, text)


def validate_query_inputs(ctx: Context) -> dict[QueryField, str]:
    """Check all four buffers, returning an error message per failing field."""
    errors: dict[QueryField, str] = {}
    for field in QUERY_FIELD_ORDER:
        try:
            validate_field(ctx, field)
        except QueryValidationError as exc:
            errors[field] = exc.message
    return errors


def current_limit(ctx: Context) -> int | None:
    """The page size the buffers describe, or None while the limit is invalid."""
    try:
        return parse_limit(ctx.buffer_text(QueryField.LIMIT), ctx.default_limit)
    except QueryValidationError:
        return None


def build_find_request(ctx: Context) -> FindRequest:
    """Compose the request for the current page of the selected collection.

    Raises:
        QueryValidationError: The first buffer that fails to parse.
        ValueError: No collection is selected.
    """
    namespace = ctx.selected_namespace()
    if namespace is None:
        raise ValueError("No collection selected")
    db, collection = namespace
    limit = parse_limit(ctx.buffer_text(QueryField.LIMIT), ctx.default_limit)
    return FindRequest(
        db=db,
        collection=collection,
        filter=parse_document(QueryField.FILTER, ctx.buffer_text(QueryField.FILTER)),
        sort=parse_document(QueryField.SORT, ctx.buffer_text(QueryField.SORT)),
        projection=parse_document(QueryField.PROJECTION, ctx.buffer_text(QueryField.PROJECTION)),
        limit=limit,
        skip=ctx.pagination.current_page * limit,
    )
