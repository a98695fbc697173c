"""Tests for swagtree.parser.walker."""

from __future__ import annotations

import copy
import logging
from typing import Any

import pytest

from swagtree.models import FieldNode, GroupRecord, InterfaceRecord, SourceConfig
from swagtree.parser.schema import SchemaNormalizer
from swagtree.parser.walker import parse_document, parse_operation


def _record(groups: list[GroupRecord], operation_id: str) -> InterfaceRecord:
    for group in groups:
        for record in group.children:
            if record.operation_id == operation_id:
                return record
    raise AssertionError(f"{operation_id} not found")


def _names(value: Any) -> list[str]:
    if isinstance(value, FieldNode):
        return [child.name for child in value.item or []]
    return [node.name for node in value]


# ---------------------------------------------------------------------------
# parse_operation
# ---------------------------------------------------------------------------


class TestParseOperation:
    def test_users_id_scenario(self) -> None:
        doc = {
            "openapi": "3.0.3",
            "paths": {
                "/users/{id}": {
                    "get": {
                        "parameters": [
                            {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}
                        ]
                    }
                }
            },
        }
        groups = parse_document(doc)

        assert len(groups) == 1
        [record] = groups[0].children
        assert isinstance(record.params, list)
        [param] = record.params
        assert (param.name, param.type, param.required) == ("id", "integer", True)

    def test_get_prefers_parameters_over_body(self) -> None:
        operation = {
            "parameters": [{"name": "q", "in": "query", "schema": {"type": "string"}}],
            "requestBody": {"content": {"application/json": {"schema": {"type": "object", "properties": {"b": {"type": "string"}}}}}},
        }
        record = parse_operation(SchemaNormalizer({}), "/search", "get", operation)
        assert _names(record.params) == ["q"]

    def test_post_prefers_body_over_parameters(self) -> None:
        operation = {
            "parameters": [{"name": "q", "in": "query", "schema": {"type": "string"}}],
            "requestBody": {"content": {"application/json": {"schema": {"type": "object", "properties": {"b": {"type": "string"}}}}}},
        }
        record = parse_operation(SchemaNormalizer({}), "/search", "post", operation)
        assert isinstance(record.params, FieldNode)
        assert _names(record.params) == ["b"]

    def test_get_falls_back_to_body(self) -> None:
        operation = {
            "requestBody": {"content": {"application/json": {"schema": {"type": "object", "properties": {"b": {"type": "string"}}}}}},
        }
        record = parse_operation(SchemaNormalizer({}), "/search", "GET", operation)
        assert _names(record.params) == ["b"]

    def test_post_falls_back_to_parameters(self) -> None:
        operation = {"parameters": [{"name": "q", "in": "query", "schema": {"type": "string"}}]}
        record = parse_operation(SchemaNormalizer({}), "/search", "post", operation)
        assert _names(record.params) == ["q"]

    def test_no_inputs_gives_empty_params(self) -> None:
        record = parse_operation(SchemaNormalizer({}), "/ping", "get", {})
        assert record.params == []
        assert record.response == "any"

    def test_operation_parameter_overrides_path_parameter(self) -> None:
        record = parse_operation(
            SchemaNormalizer({}),
            "/items/{id}",
            "get",
            {"parameters": [{"name": "id", "in": "path", "schema": {"type": "string"}}]},
            path_parameters=[
                {"name": "id", "in": "path", "schema": {"type": "integer"}},
                {"name": "v", "in": "query", "schema": {"type": "integer"}},
            ],
        )
        assert [(p.name, p.type) for p in record.params] == [("id", "string"), ("v", "integer")]

    def test_title_precedence(self) -> None:
        normalizer = SchemaNormalizer({})
        both = parse_operation(normalizer, "/a", "get", {"description": "Desc", "summary": "Sum"})
        summary = parse_operation(normalizer, "/a", "get", {"summary": "Sum"})
        neither = parse_operation(normalizer, "/a/b", "get", {})
        assert both.title == "Desc"
        assert summary.title == "Sum"
        assert neither.title == "aB"

    def test_names_and_subtitle(self) -> None:
        record = parse_operation(
            SchemaNormalizer({}), "/api/v3/pet/findByStatus", "get", {}, base_path="/api/v3"
        )
        assert record.file_name == "pet-find-by-status"
        assert record.path_name == "petFindByStatus"
        assert record.sub_title == "/api/v3/pet/findByStatus"
        assert record.base_path == "/api/v3"

    def test_multiple_methods_append_method(self) -> None:
        record = parse_operation(SchemaNormalizer({}), "/pets", "DELETE", {}, multiple_methods=True)
        assert record.method == "delete"
        assert record.file_name == "pets-delete"
        assert record.path_name == "petsDelete"

    def test_key_is_deterministic(self) -> None:
        normalizer = SchemaNormalizer({})
        first = parse_operation(normalizer, "/pets", "get", {"summary": "List"})
        second = parse_operation(normalizer, "/pets", "get", {"summary": "List"})
        other = parse_operation(normalizer, "/pets", "post", {"summary": "List"})
        assert first.key == second.key
        assert first.key.startswith("List-")
        assert first.key != other.key

    def test_tags_are_deduplicated(self) -> None:
        record = parse_operation(SchemaNormalizer({}), "/a", "get", {"tags": ["x", "x", "", 3, "y"]})
        assert record.tags == ["x", "y"]


# ---------------------------------------------------------------------------
# parse_document
# ---------------------------------------------------------------------------


class TestParseDocument:
    def test_groups_in_first_encounter_order(self, petstore_raw: dict[str, Any]) -> None:
        groups = parse_document(petstore_raw)
        assert [g.title for g in groups] == ["pets", "admin", "default", "misc"]
        assert [len(g.children) for g in groups] == [3, 1, 1, 3]

    def test_children_keep_document_order(self, petstore_raw: dict[str, Any]) -> None:
        pets = parse_document(petstore_raw)[0]
        assert [c.operation_id for c in pets.children] == ["listPets", "createPet", "getPetById"]

    def test_multi_tag_record_is_keyed_per_group(self, petstore_raw: dict[str, Any]) -> None:
        groups = parse_document(petstore_raw)
        in_pets = groups[0].children[1]
        in_admin = groups[1].children[0]

        assert in_pets.operation_id == in_admin.operation_id == "createPet"
        assert in_pets.parent_key == groups[0].key
        assert in_admin.parent_key == groups[1].key
        assert in_pets.key != in_admin.key

    def test_untagged_operation_uses_default_group(self, petstore_raw: dict[str, Any]) -> None:
        groups = parse_document(petstore_raw, default_group="other")
        other = next(g for g in groups if g.title == "other")
        assert [c.operation_id for c in other.children] == ["uploadPhotos"]
        assert other.children[0].deprecated is True

    def test_record_contents(self, petstore_raw: dict[str, Any]) -> None:
        groups = parse_document(petstore_raw)

        list_pets = _record(groups, "listPets")
        assert list_pets.title == "List pets"
        assert list_pets.file_name == "v1-pets-get"
        assert _names(list_pets.params) == ["limit", "status"]

        create = _record(groups, "createPet")
        assert create.title == "Create a pet"
        assert isinstance(create.params, FieldNode)
        assert create.params.tit_ref == "Pet"

        get_pet = _record(groups, "getPetById")
        assert get_pet.file_name == "pets-pet-id"
        assert get_pet.path_name == "petsPetId"
        assert [(p.name, p.required) for p in get_pet.params] == [("petId", True)]

        upload = _record(groups, "uploadPhotos")
        assert upload.response == "number"

    def test_unresolvable_body_leaves_params_empty(
        self, petstore_raw: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            groups = parse_document(petstore_raw)
        broken = _record(groups, "brokenBody")
        assert broken.params is None
        assert broken.response == "any"
        assert "requestBody schema is null" in caplog.text

    def test_source_supplies_keys_and_names(self, petstore_raw: dict[str, Any]) -> None:
        source = SourceConfig(url="https://example.com/openapi.json", title="Shop", base_path="/api/v1")
        groups = parse_document(petstore_raw, source)

        assert all(g.parent_key == source.url for g in groups)
        list_pets = _record(groups, "listPets")
        assert list_pets.group_name == "Shop"
        assert list_pets.file_name == "pets-get"
        assert list_pets.base_path == "/api/v1"

    def test_group_name_defaults_to_document_title(self, petstore_raw: dict[str, Any]) -> None:
        assert _record(parse_document(petstore_raw), "listPets").group_name == "Petstore API"

    def test_walk_is_repeatable(self, petstore_raw: dict[str, Any]) -> None:
        assert parse_document(petstore_raw) == parse_document(petstore_raw)

    def test_document_is_not_modified(self, petstore_raw: dict[str, Any]) -> None:
        before = copy.deepcopy(petstore_raw)
        parse_document(petstore_raw)
        assert petstore_raw == before

    def test_non_method_keys_are_ignored(self) -> None:
        doc = {
            "paths": {
                "/a": {
                    "summary": "Path summary",
                    "servers": [{"url": "https://x"}],
                    "parameters": [],
                    "get": {"tags": ["t"]},
                }
            }
        }
        [group] = parse_document(doc)
        [record] = group.children
        assert record.method == "get"
        assert record.file_name == "a"

    def test_referenced_path_item(self) -> None:
        doc = {
            "paths": {"/a": {"$ref": "#/components/pathItems/A"}},
            "components": {"pathItems": {"A": {"get": {"tags": ["t"], "summary": "Via ref"}}}},
        }
        [group] = parse_document(doc)
        assert group.children[0].title == "Via ref"

    def test_missing_paths(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert parse_document({"openapi": "3.0.0"}) == []
        assert "no paths" in caplog.text

    def test_non_mapping_document(self) -> None:
        assert parse_document(None) == []  # type: ignore[arg-type]
