"""Tests for swagtree.search."""

from __future__ import annotations

from typing import Any

import pytest

from swagtree.models import GroupRecord
from swagtree.parser import parse_document
from swagtree.search import build_search_list, find_interface, search


@pytest.fixture
def groups(petstore_raw: dict[str, Any]) -> list[GroupRecord]:
    return parse_document(petstore_raw)


class TestBuildSearchList:
    def test_one_entry_per_grouped_record(self, groups: list[GroupRecord]) -> None:
        entries = build_search_list(groups)
        assert len(entries) == sum(len(g.children) for g in groups) == 8

    def test_entry_shape(self, groups: list[GroupRecord]) -> None:
        entry = build_search_list(groups, api_url="https://x/openapi.json", directory="Shop")[0]
        assert entry.label == "List pets"
        assert entry.description == "<GET> [Shop / pets] v1PetsGet"
        assert entry.detail == "/api/v1/pets"
        assert entry.api_url == "https://x/openapi.json"
        assert entry.group_title == "pets"
        assert entry.source.operation_id == "listPets"

    def test_without_directory(self, groups: list[GroupRecord]) -> None:
        entry = build_search_list(groups)[0]
        assert entry.description == "<GET> [pets] v1PetsGet"


class TestSearch:
    def test_case_insensitive(self, groups: list[GroupRecord]) -> None:
        matches = search(build_search_list(groups), "UPLOAD")
        assert [m.source.operation_id for m in matches] == ["uploadPhotos"]

    def test_matches_path_and_method(self, groups: list[GroupRecord]) -> None:
        matches = search(build_search_list(groups), "<put>")
        assert [m.detail for m in matches] == ["/api/v1/pets/{petId}/photos"]

    def test_empty_query_matches_all(self, groups: list[GroupRecord]) -> None:
        entries = build_search_list(groups)
        assert search(entries, "  ") == entries

    def test_no_match(self, groups: list[GroupRecord]) -> None:
        assert search(build_search_list(groups), "zebra") == []


class TestFindInterface:
    @pytest.mark.parametrize("name", ["petsPetId", "pets-pet-id", "getPetById"])
    def test_finds_by_name(self, groups: list[GroupRecord], name: str) -> None:
        record = find_interface(groups, name)
        assert record is not None
        assert record.path == "/api/v1/pets/{petId}"

    def test_finds_by_key(self, groups: list[GroupRecord]) -> None:
        key = groups[1].children[0].key
        record = find_interface(groups, key)
        assert record is not None
        assert record.parent_key == groups[1].key

    def test_missing(self, groups: list[GroupRecord]) -> None:
        assert find_interface(groups, "nope") is None
