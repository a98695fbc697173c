"""Normalize OpenAPI schema nodes into :class:`~swagtree.models.FieldNode` trees.

A schema can reach the normalizer in many equivalent encodings: an inline
object, a ``$ref`` to a component, an array whose ``items`` is itself a
reference, an array of arrays, or an ``allOf`` composition.  The
:class:`SchemaNormalizer` collapses all of them into one canonical tree.

The walk works on *Field-Node-shaped* dicts: a copy of the schema carrying the
field ``name``, the parent-derived ``required`` flag and the
``itemsRequiredNamesList`` that governs the node's own children.  The loaded
document is only ever read; every step builds new dicts and new nodes.

Dispatch is on the schema ``type``:

* ``array`` -- :meth:`SchemaNormalizer.parse_array`, which dereferences the
  element schema and recurses for arrays of arrays.
* anything else -- :meth:`SchemaNormalizer.parse_object`, which walks
  ``properties`` and merges ``allOf`` branches with :func:`merge_all_of`.

Reference cycles are cut rather than followed: the ``$ref`` strings on the
current descent path travel down as ``seen``, and a property whose reference is
already on the path becomes a leaf named after the component.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from swagtree.models import FieldNode
from swagtree.parser.pointer import resolve_pointer

logger = logging.getLogger(__name__)

FieldList = Union[list[FieldNode], str, None]
"""Children of a node, or a bare type string standing in for "no fields"."""


def handle_type(type_value: Any) -> str:
    """Map a schema ``type`` onto the primitive name used in rendered output.

    Args:
        type_value: A ``type`` string, an OpenAPI 3.1 type array, or ``None``.

    Returns:
        ``"number"`` for integers, ``"File"`` for ``file``, ``"any"`` when
        the type is missing, and the type itself otherwise.
    """
    type_tag, _ = split_type(type_value)
    if type_tag is None:
        return "any"
    if type_tag == "integer":
        return "number"
    if type_tag == "file":
        return "File"
    return type_tag


def merge_all_of(a: FieldList, b: FieldList) -> FieldList:
    """Merge two field lists produced from ``allOf`` branches.

    Fields are keyed by name.  On a collision the field from *a* is kept and
    the later one dropped; order is first-encounter order.  When either side
    is ``None`` or a bare type string there is nothing to merge and the other
    side is returned unchanged.

    Example::

        merge_all_of([x, y1], [y2, z])  # -> [x, y1, z]
    """
    if a is None or isinstance(a, str):
        return b
    if b is None or isinstance(b, str):
        return a

    merged: dict[str, FieldNode] = {}
    for field in [*a, *b]:
        merged.setdefault(field.name, field)
    return list(merged.values())


class SchemaNormalizer:
    """Turn schema nodes of one OpenAPI document into :class:`FieldNode` trees.

    Args:
        document: The loaded OpenAPI document.  It is never mutated.

    Example::

        normalizer = SchemaNormalizer(doc)
        schema = normalizer.dereference_schema({"$ref": "#/components/schemas/Pet"})
        node = normalizer.parse_schema_object(schema, "")
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = document

    @property
    def document(self) -> dict[str, Any]:
        """The document references are resolved against."""
        return self._document

    # ------------------------------------------------------------------ #
    # Dereferencing
    # ------------------------------------------------------------------ #

    def dereference_schema(self, schema: Any) -> Any:
        """Resolve *schema* if it is a ``{"$ref": ...}`` node.

        References are chased until a non-reference node is reached, so a
        reference to a reference yields the final target.  Anything that is
        not a reference is returned unchanged.  Never raises.

        Returns:
            The resolved node, *schema* itself, or ``None`` when *schema* is
            ``None``, the target is missing, or the references form a cycle.
        """
        node, _ = self.dereference_with_refs(schema)
        return node

    def dereference_with_refs(self, schema: Any) -> tuple[Any, tuple[str, ...]]:
        """Like :meth:`dereference_schema`, also returning the refs followed."""
        followed: list[str] = []
        node = schema
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in followed:
                logger.warning("dereference_schema: reference cycle at %s.", ref)
                return None, tuple(followed)
            followed.append(ref)
            node = resolve_pointer(self._document, ref)
            if node is None:
                logger.warning("dereference_schema: %s could not be resolved.", ref)
        return node, tuple(followed)

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def parse_schema_object(
        self,
        schema: dict[str, Any],
        name: str,
        parent_required: Optional[list[str]] = None,
        *,
        seen: frozenset[str] = frozenset(),
    ) -> FieldNode:
        """Normalize an already dereferenced schema into a :class:`FieldNode`.

        ``required`` is computed from *parent_required*; the schema's own
        ``required`` list is forwarded as ``itemsRequiredNamesList`` because it
        governs the schema's children, not the schema itself.

        Args:
            schema: The dereferenced schema.
            name: Field name (``""`` for a root body or response).
            parent_required: The parent's required-name list.
            seen: ``$ref`` strings on the current descent path.
        """
        item = {key: value for key, value in schema.items() if key != "required"}
        item["name"] = name
        item["required"] = bool(parent_required) and name in parent_required
        item["itemsRequiredNamesList"] = required_names(schema.get("required"))

        if split_type(schema.get("type"))[0] == "array":
            return self.parse_array(item, seen=seen)
        return self.parse_object(item, seen=seen)

    # ------------------------------------------------------------------ #
    # Arrays
    # ------------------------------------------------------------------ #

    def parse_array(
        self, array_item: dict[str, Any], *, seen: frozenset[str] = frozenset()
    ) -> FieldNode:
        """Normalize a Field-Node-shaped array schema.

        The element schema is dereferenced and spread into a new node that
        keeps the array's ``name``, ``type`` and ``required`` flag and records
        the element type as ``itemsType``.  Arrays of arrays recurse; arrays of
        objects finish in :meth:`parse_object`; arrays of primitives end as a
        leaf with ``itemsType`` set.
        """
        items, refs = self.dereference_with_refs(array_item.get("items"))
        items = _as_schema(items)

        item_schema: dict[str, Any] = {
            "name": array_item.get("name") or "",
            "type": array_item.get("type"),
            "itemsType": split_type(items.get("type"))[0],
            "description": array_item.get("description"),
            "titRef": ref_name(refs) or array_item.get("titRef"),
            **{k: v for k, v in items.items() if k not in ("type", "required")},
            "required": array_item.get("required"),
            "itemsRequiredNamesList": (
                required_names(items.get("required")) or array_item.get("itemsRequiredNamesList")
            ),
        }

        if not split_type(array_item.get("type"))[0]:
            return _to_field_node(item_schema)

        if any(ref in seen for ref in refs):
            logger.debug(
                "parse_array: cutting reference cycle at %s (field '%s').",
                refs[-1],
                item_schema["name"],
            )
            return _to_field_node(item_schema)

        next_seen = seen.union(refs)
        if item_schema["itemsType"] == "array":
            return self.parse_array(item_schema, seen=next_seen)
        return self.parse_object(item_schema, seen=next_seen)

    # ------------------------------------------------------------------ #
    # Objects
    # ------------------------------------------------------------------ #

    def parse_object(
        self, object_item: dict[str, Any], *, seen: frozenset[str] = frozenset()
    ) -> FieldNode:
        """Normalize a Field-Node-shaped object (or scalar) schema.

        ``properties`` become the node's ``item`` children.  ``allOf`` branches
        are normalized and merged after the node's own properties, first
        occurrence winning.  ``oneOf``/``anyOf`` unions are not expanded.  A
        schema with neither is returned as a leaf.
        """
        name = object_item.get("name") or ""
        own_required = object_item.get("itemsRequiredNamesList")
        children: FieldList = None

        properties = object_item.get("properties")
        if isinstance(properties, dict):
            children = self.parse_properties(properties, own_required, seen=seen)

        all_of = object_item.get("allOf")
        if isinstance(all_of, list) and all_of:
            children = merge_all_of(children, self._parse_all_of(all_of, name, seen))
        elif object_item.get("oneOf") or object_item.get("anyOf"):
            logger.debug("parse_object: union on '%s' left unexpanded.", name)

        if isinstance(children, str):
            if not object_item.get("type"):
                object_item = {**object_item, "type": children}
            children = None
        elif children is not None and own_required:
            children = [
                child.model_copy(update={"required": True})
                if child.name in own_required and not child.required
                else child
                for child in children
            ]

        return _to_field_node(object_item, item=children)

    def parse_properties(
        self,
        properties: dict[str, Any],
        parent_required: Optional[list[str]] = None,
        *,
        seen: frozenset[str] = frozenset(),
    ) -> list[FieldNode]:
        """Normalize every property of an object in declaration order.

        Properties whose schema cannot be dereferenced are skipped.  A property
        referencing a component already on the descent path becomes a leaf.
        """
        nodes: list[FieldNode] = []
        for name, source in properties.items():
            schema, refs = self.dereference_with_refs(source)
            if schema is None:
                continue
            schema = with_ref_title(_as_schema(schema), refs)

            if any(ref in seen for ref in refs):
                logger.debug(
                    "parse_properties: cutting reference cycle at %s (field '%s').",
                    refs[-1],
                    name,
                )
                leaf = {**schema, "name": name, "required": bool(parent_required) and name in parent_required}
                nodes.append(_to_field_node(leaf))
                continue

            nodes.append(
                self.parse_schema_object(
                    schema, name, parent_required, seen=seen.union(refs)
                )
            )
        return nodes

    def _parse_all_of(
        self, branches: list[Any], name: str, seen: frozenset[str]
    ) -> FieldList:
        """Normalize each ``allOf`` branch and fold the results together."""
        merged: FieldList = None
        for branch in branches:
            schema, refs = self.dereference_with_refs(branch)
            if not isinstance(schema, dict):
                logger.warning("parse_object: allOf branch of '%s' is null.", name)
                continue
            if any(ref in seen for ref in refs):
                logger.debug("parse_object: skipping recursive allOf branch %s.", refs[-1])
                continue
            parsed = self.parse_schema_object(schema, name, seen=seen.union(refs))
            merged = merge_all_of(
                merged, parsed.item if parsed.item is not None else parsed.type
            )
        return merged


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def split_type(type_value: Any) -> tuple[Optional[str], bool]:
    """Return ``(type_tag, nullable)`` for a type string or an OpenAPI 3.1 type array.

    A type array collapses to its first non-``null`` member.
    """
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return (str(non_null[0]) if non_null else None), "null" in type_value
    if type_value is None or type_value == "":
        return None, False
    return str(type_value), False


def required_names(value: Any) -> Optional[list[str]]:
    """Return *value* as a list of field names, or ``None`` if it is not a list."""
    if not isinstance(value, list):
        return None
    return [name for name in value if isinstance(name, str)]


def _as_schema(node: Any) -> dict[str, Any]:
    return node if isinstance(node, dict) else {}


def ref_name(refs: tuple[str, ...]) -> Optional[str]:
    """Component name of the last reference followed, e.g. ``Pet``."""
    if not refs or not isinstance(refs[-1], str):
        return None
    return refs[-1].rstrip("/").rsplit("/", 1)[-1] or None


def with_ref_title(schema: dict[str, Any], refs: tuple[str, ...]) -> dict[str, Any]:
    """Copy *schema* with ``titRef`` naming the component it was reached through."""
    component = ref_name(refs)
    if component is None or schema.get("title"):
        return schema
    return {**schema, "titRef": component}


def _text(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _to_field_node(
    data: dict[str, Any], item: Optional[list[FieldNode]] = None
) -> FieldNode:
    """Build a :class:`FieldNode` from a Field-Node-shaped dict."""
    type_tag, nullable = split_type(data.get("type"))
    required = data.get("required")
    deprecated = data.get("deprecated")
    enum_values = data.get("enum")
    return FieldNode(
        name=str(data.get("name") or ""),
        required=required if isinstance(required, bool) else None,
        type=type_tag,
        items_type=split_type(data.get("itemsType"))[0],
        items_required_names_list=required_names(data.get("itemsRequiredNamesList")),
        item=item,
        description=_text(data.get("description")),
        tit_ref=_text(data.get("title")) or _text(data.get("titRef")),
        format=_text(data.get("format")),
        enum=list(enum_values) if isinstance(enum_values, list) else None,
        default=data.get("default"),
        example=data.get("example"),
        nullable=True if nullable or data.get("nullable") is True else None,
        deprecated=deprecated if isinstance(deprecated, bool) else None,
    )
