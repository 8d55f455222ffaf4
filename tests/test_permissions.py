"""Tests for operations, access values, matrix helpers and the resource registry."""

from __future__ import annotations

import pytest

from aclcore import (
    DENIED,
    FULL,
    AccessType,
    Client,
    Filtered,
    MatrixValidationError,
    Operation,
    Projected,
    ResourceRegistry,
    Role,
    filter_fields,
    format_matrix,
    parse_access_value,
    resolve_own_operations,
    validate_matrix,
)
from aclcore.permissions import dump_matrix, parse_matrix, parse_resource_map


class TestOperation:
    """Tests for the Operation enum."""

    def test_closed_set(self) -> None:
        assert {op.value for op in Operation} == {
            "create", "read", "update", "delete",
            "createOwn", "readOwn", "updateOwn", "deleteOwn",
        }

    def test_own_base(self) -> None:
        assert Operation.READ_OWN.is_own
        assert Operation.READ_OWN.base is Operation.READ
        assert Operation.READ.base is Operation.READ
        assert not Operation.DELETE.is_own

    def test_parse(self) -> None:
        assert Operation.parse("updateOwn") is Operation.UPDATE_OWN
        assert Operation.parse("publish") is None

    def test_access_types(self) -> None:
        assert AccessType.ALL == {"admin", "user"}


class TestParseAccessValue:
    """Tests for raw grant parsing."""

    @pytest.mark.parametrize("raw", [False, None])
    def test_denied(self, raw) -> None:
        assert parse_access_value(raw) == DENIED

    def test_full(self) -> None:
        assert parse_access_value(True) == FULL

    def test_projection(self) -> None:
        value = parse_access_value({"fields": {"title": 1}})
        assert value == Projected({"title": 1})
        assert value.is_inclusion
        assert not value.is_exclusion

    def test_filter_with_fields(self) -> None:
        value = parse_access_value({"filter": {"published": True}, "fields": {"body": 0}})
        assert value == Filtered({"published": True}, {"body": 0})

    @pytest.mark.parametrize("raw", [{}, {"fields": {}}, {"filter": {}}])
    def test_no_restriction_is_full(self, raw) -> None:
        assert parse_access_value(raw) == FULL

    def test_invalid_type(self) -> None:
        with pytest.raises(TypeError):
            parse_access_value("yes")

    def test_input_not_aliased(self) -> None:
        fields = {"title": 1}
        value = parse_access_value({"fields": fields})
        fields["body"] = 1
        assert value.fields == {"title": 1}

    def test_to_raw_round_values(self) -> None:
        assert DENIED.to_raw() is False
        assert FULL.to_raw() is True
        assert Filtered({"a": 1}).to_raw() == {"filter": {"a": 1}}


class TestMatrixHelpers:
    """Tests for parsing and formatting matrices."""

    def test_parse_matrix_is_sparse(self) -> None:
        matrix = parse_matrix({"read": True, "update": False, "publish": True})
        assert matrix == {Operation.READ: FULL}

    def test_parse_resource_map_drops_empty(self) -> None:
        assert parse_resource_map({"a": {"read": False}, "b": {"read": True}}) == {"b": {Operation.READ: FULL}}

    def test_format_fills_denied(self) -> None:
        formatted = format_matrix({Operation.READ: Projected({"title": 1})})
        assert formatted["read"] == {"fields": {"title": 1}}
        assert len(formatted) == 8
        assert all(formatted[op.value] is False for op in Operation if op is not Operation.READ)

    def test_dump_matrix(self) -> None:
        assert dump_matrix({Operation.DELETE: FULL, Operation.READ: DENIED}) == {"delete": True}


class TestValidateMatrix:
    """Tests for write-path validation."""

    def test_valid(self) -> None:
        validate_matrix({"read": True, "update": {"filter": {"a": 1}, "fields": {"b": 0}}})

    def test_collects_all_errors(self) -> None:
        with pytest.raises(MatrixValidationError) as exc_info:
            validate_matrix({"publish": True, "read": "yes", "update": {"where": {}, "filter": 3}})
        errors = exc_info.value.errors
        assert "Invalid access type: publish" in errors
        assert "Invalid value for read (expected boolean or object)" in errors
        assert "Invalid key in access matrix: update.where" in errors
        assert "Invalid value in access matrix: update.filter (expected object)" in errors
        assert exc_info.value.code == "ACCESS_MATRIX_VALIDATION_FAILED"

    def test_mixed_projection_rejected(self) -> None:
        with pytest.raises(MatrixValidationError):
            validate_matrix({"read": {"fields": {"a": 1, "b": 0}}})

    def test_not_an_object(self) -> None:
        with pytest.raises(MatrixValidationError):
            validate_matrix(["read"])

    def test_model_grants_validation(self) -> None:
        role = Role(name="editor", resources={"r": {"read": {"fields": {"a": 1, "b": 0}}}})
        with pytest.raises(MatrixValidationError):
            role.validate_grants()
        Client(client_id="C1", resources={"r": {"read": True}}).validate_grants()


class TestResolveOwnOperations:
    """Tests for folding *Own operations into owner filters."""

    def test_own_only(self) -> None:
        matrix = {Operation.UPDATE_OWN: FULL}
        assert resolve_own_operations(matrix, "C1") == {Operation.UPDATE: Filtered({"_createdBy": "C1"})}

    def test_full_base_kept(self) -> None:
        matrix = {Operation.READ: FULL, Operation.READ_OWN: FULL}
        assert resolve_own_operations(matrix, "C1") == {Operation.READ: FULL}

    def test_filters_combined(self) -> None:
        matrix = {
            Operation.READ: Filtered({"published": True}),
            Operation.READ_OWN: Filtered({"draft": True}, {"title": 1}),
        }
        assert resolve_own_operations(matrix, "C1") == {
            Operation.READ: Filtered({"published": True, "draft": True, "_createdBy": "C1"}, {"title": 1}),
        }

    def test_base_fields_preferred(self) -> None:
        matrix = {Operation.READ: Projected({"body": 0}), Operation.READ_OWN: Projected({"title": 1})}
        assert resolve_own_operations(matrix, "C1")[Operation.READ] == Filtered(
            {"_createdBy": "C1"}, {"body": 0}
        )

    def test_untouched_without_own(self) -> None:
        matrix = {Operation.CREATE: FULL}
        assert resolve_own_operations(matrix, "C1") == matrix


class TestFilterFields:
    """Tests for applying projections to data."""

    def test_inclusion_on_list(self) -> None:
        assert filter_fields(Projected({"title": 1}), ["title", "body"]) == ["title"]

    def test_exclusion_on_document(self) -> None:
        doc = {"title": "x", "body": "y", "_id": "1"}
        assert filter_fields(Projected({"body": 0}), doc) == {"title": "x", "_id": "1"}

    def test_id_zero_alone_is_inclusion(self) -> None:
        assert filter_fields(Projected({"_id": 0, "title": 1}), ["_id", "title", "body"]) == ["title"]

    def test_no_projection_unchanged(self) -> None:
        doc = {"title": "x"}
        assert filter_fields(FULL, doc) is doc
        assert filter_fields(Filtered({"a": 1}), doc) is doc

    def test_empty_input(self) -> None:
        assert filter_fields(Projected({"title": 1}), []) == []


class TestResourceRegistry:
    """Tests for the resource registry."""

    def test_register_and_describe(self) -> None:
        registry = ResourceRegistry()
        registry.register("collection:library_book", "Books")
        assert registry.has("collection:library_book")
        assert "collection:library_book" in registry
        assert registry.describe("collection:library_book") == "Books"

    def test_unknown(self) -> None:
        registry = ResourceRegistry()
        assert not registry.has("nope")
        assert registry.describe("nope") is None

    def test_reregister_overwrites(self) -> None:
        registry = ResourceRegistry()
        registry.register("clients", "old")
        registry.register("clients", "new")
        assert registry.all() == {"clients": "new"}
        assert len(registry) == 1

    def test_description_optional(self) -> None:
        registry = ResourceRegistry()
        registry.register("roles")
        assert registry.has("roles")
        assert registry.describe("roles") is None

    def test_all_is_a_copy(self) -> None:
        registry = ResourceRegistry()
        registry.register("roles")
        registry.all()["clients"] = None
        assert not registry.has("clients")

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            ResourceRegistry().register("")
