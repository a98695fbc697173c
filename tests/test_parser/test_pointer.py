"""Tests for swagtree.parser.pointer."""

from __future__ import annotations

import pytest

from swagtree.exceptions import RefResolutionError, SpecParseError
from swagtree.parser.pointer import get_value_by_path, resolve_pointer, split_pointer


DOC = {
    "components": {
        "schemas": {
            "Pet": {"type": "object"},
            "a/b": {"type": "string"},
            "til~de": {"type": "integer"},
        }
    },
    "tags": [{"name": "pets"}, {"name": "store"}],
}


# ---------------------------------------------------------------------------
# split_pointer
# ---------------------------------------------------------------------------


class TestSplitPointer:
    def test_simple_pointer(self) -> None:
        assert split_pointer("#/components/schemas/Pet") == ["components", "schemas", "Pet"]

    def test_hash_is_optional(self) -> None:
        assert split_pointer("/components/schemas") == ["components", "schemas"]

    def test_root_pointer_is_empty(self) -> None:
        assert split_pointer("#") == []
        assert split_pointer("#/") == []

    def test_bracket_index(self) -> None:
        assert split_pointer("#/tags[1]/name") == ["tags", "1", "name"]

    def test_rfc6901_escapes(self) -> None:
        assert split_pointer("#/components/schemas/a~1b") == ["components", "schemas", "a/b"]
        assert split_pointer("#/components/schemas/til~0de") == [
            "components",
            "schemas",
            "til~de",
        ]

    def test_percent_decoding(self) -> None:
        assert split_pointer("#/paths/~1pets%7Bid%7D") == ["paths", "/pets{id}"]


# ---------------------------------------------------------------------------
# get_value_by_path
# ---------------------------------------------------------------------------


class TestGetValueByPath:
    def test_walks_mappings(self) -> None:
        assert get_value_by_path(DOC, ["components", "schemas", "Pet"]) == {"type": "object"}

    def test_walks_sequences(self) -> None:
        assert get_value_by_path(DOC, ["tags", "1", "name"]) == "store"

    def test_empty_path_returns_root(self) -> None:
        assert get_value_by_path(DOC, []) is DOC

    def test_missing_key_returns_none(self) -> None:
        assert get_value_by_path(DOC, ["components", "nope"]) is None

    def test_index_out_of_range_returns_none(self) -> None:
        assert get_value_by_path(DOC, ["tags", "9"]) is None

    def test_strict_missing_key_raises(self) -> None:
        with pytest.raises(RefResolutionError, match="key 'nope' not found"):
            get_value_by_path(DOC, ["components", "nope"], strict=True)


# ---------------------------------------------------------------------------
# resolve_pointer
# ---------------------------------------------------------------------------


class TestResolvePointer:
    def test_resolves_component(self) -> None:
        assert resolve_pointer(DOC, "#/components/schemas/Pet") is DOC["components"]["schemas"]["Pet"]

    def test_resolves_escaped_name(self) -> None:
        assert resolve_pointer(DOC, "#/components/schemas/a~1b") == {"type": "string"}

    def test_unresolvable_returns_none(self) -> None:
        assert resolve_pointer(DOC, "#/components/schemas/Missing") is None

    def test_external_ref_returns_none(self) -> None:
        assert resolve_pointer(DOC, "other.yaml#/Pet") is None

    def test_non_string_ref_returns_none(self) -> None:
        assert resolve_pointer(DOC, None) is None  # type: ignore[arg-type]

    def test_strict_unresolvable_raises(self) -> None:
        with pytest.raises(RefResolutionError, match="Cannot resolve \\$ref"):
            resolve_pointer(DOC, "#/components/schemas/Missing", strict=True)

    def test_strict_external_raises(self) -> None:
        with pytest.raises(RefResolutionError, match="External \\$ref not supported"):
            resolve_pointer(DOC, "other.yaml#/Pet", strict=True)

    def test_ref_error_is_spec_parse_error(self) -> None:
        with pytest.raises(SpecParseError):
            resolve_pointer(DOC, "#/nope", strict=True)

    def test_document_is_not_modified(self) -> None:
        before = repr(DOC)
        resolve_pointer(DOC, "#/components/schemas/Pet")
        assert repr(DOC) == before
