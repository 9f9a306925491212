"""Tests for parsing the query builder buffers."""

from __future__ import annotations

import pytest
from bson.objectid import ObjectId

from mongotui.core.context import Context, QueryField
from mongotui.core.errors import QueryValidationError
from mongotui.db.models import DatabaseInfo
from mongotui.domains.query.app.validation import (
    build_find_request,
    current_limit,
    parse_document,
    parse_limit,
    validate_query_inputs,
)


def make_context(**buffers: str) -> Context:
    ctx = Context(databases=[DatabaseInfo.from_names("db1", ["users"])])
    ctx.selected_db_index = 0
    ctx.selected_coll_index = 0
    for name, text in buffers.items():
        ctx.query_inputs[QueryField(name)].set_text(text)
    return ctx


class TestParseDocument:
    def test_blank_means_no_document(self):
        assert parse_document(QueryField.FILTER, "   ") is None

    def test_parses_object(self):
        assert parse_document(QueryField.FILTER, '{"age": {"$gt": 21}}') == {"age": {"$gt": 21}}

    def test_understands_extended_json(self):
        oid = "65a1b2c3d4e5f6a7b8c9d0e1"
        parsed = parse_document(QueryField.FILTER, f'{{"_id": {{"$oid": "{oid}"}}}}')
        assert parsed == {"_id": ObjectId(oid)}

    def test_rejects_malformed_json(self):
        with pytest.raises(QueryValidationError) as exc_info:
            parse_document(QueryField.SORT, "{name: }")
        assert exc_info.value.field is QueryField.SORT
        assert str(exc_info.value).startswith("Sort: invalid JSON")

    def test_rejects_non_object(self):
        with pytest.raises(QueryValidationError, match="expected a JSON object"):
            parse_document(QueryField.PROJECTION, "[1, 2]")


class TestParseLimit:
    def test_blank_uses_default(self):
        assert parse_limit("", 20) == 20

    def test_parses_integer(self):
        assert parse_limit(" 5 ", 20) == 5

    @pytest.mark.parametrize("text", ["five", "0", "-3", "2.5"])
    def test_rejects_non_positive_or_non_integer(self, text):
        with pytest.raises(QueryValidationError) as exc_info:
            parse_limit(text, 20)
        assert exc_info.value.field is QueryField.LIMIT


class TestValidateQueryInputs:
    def test_valid_buffers_have_no_errors(self):
        ctx = make_context(filter='{"a": 1}', sort='{"a": -1}', limit="5")
        assert validate_query_inputs(ctx) == {}

    def test_only_failing_fields_are_reported(self):
        ctx = make_context(filter="{oops", sort='{"a": 1}', limit="x")
        errors = validate_query_inputs(ctx)
        assert set(errors) == {QueryField.FILTER, QueryField.LIMIT}

    def test_current_limit_is_none_while_invalid(self):
        assert current_limit(make_context(limit="x")) is None
        assert current_limit(make_context()) == 20


class TestBuildFindRequest:
    def test_skip_is_page_times_limit(self):
        ctx = make_context(limit="5")
        ctx.pagination.current_page = 3
        request = build_find_request(ctx)
        assert (request.db, request.collection) == ("db1", "users")
        assert request.limit == 5
        assert request.skip == 15

    def test_blank_buffers_become_none(self):
        request = build_find_request(make_context())
        assert request.filter is None
        assert request.sort is None
        assert request.projection is None
        assert request.skip == 0

    def test_requires_selected_collection(self):
        ctx = make_context()
        ctx.selected_coll_index = None
        with pytest.raises(ValueError):
            build_find_request(ctx)

    def test_uses_configured_default_limit(self):
        ctx = Context(databases=[DatabaseInfo.from_names("db1", ["users"])], default_limit=50)
        ctx.selected_db_index = 0
        ctx.selected_coll_index = 0
        assert build_find_request(ctx).limit == 50
        assert ctx.query_inputs[QueryField.LIMIT].placeholder == "50"


@pytest.mark.parametrize(
    "text",
    [
        '{"a": {"$numberDecimal": "abc"}}',
        '{"a": {"$numberLong": "ten"}}',
        '{"a": {"$oid": "not-hex"}}',
        '{"a": {"$date": "yesterday"}}',
    ],
)
def test_bad_extended_json_literal_is_a_validation_error(text):
    with pytest.raises(QueryValidationError) as exc_info:
        parse_document(QueryField.FILTER, text)
    assert exc_info.value.field is QueryField.FILTER
