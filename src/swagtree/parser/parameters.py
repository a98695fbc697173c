"""Collect an operation's parameters into a flat, deduplicated node list.

Header parameters are dropped entirely: they are transport concerns and do
not belong in the generated request type.  Some generators (NestJS swagger
among them) emit the same parameter twice; the first occurrence wins and later
ones are silently discarded.

Each kept parameter is turned into a Field-Node-shaped dict merging the
parameter's own ``name``/``description``/``required`` with its schema (a
``description`` on the schema takes precedence), then finished by the
:class:`~swagtree.parser.schema.SchemaNormalizer` array or object parser.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from swagtree.models import FieldNode
from swagtree.parser.schema import (
    SchemaNormalizer,
    ref_name,
    required_names,
    split_type,
)

logger = logging.getLogger(__name__)


def parse_parameters(
    normalizer: SchemaNormalizer, parameters: Optional[list[Any]]
) -> list[FieldNode]:
    """Normalize an operation's ``parameters`` list.

    Args:
        normalizer: The normalizer bound to the document being walked.
        parameters: The raw ``parameters`` array; entries may be ``$ref``
            nodes pointing at ``components/parameters``.

    Returns:
        One :class:`FieldNode` per distinct parameter name, in first-seen
        order.  An absent list yields ``[]`` and logs a warning.
    """
    if parameters is None:
        logger.warning("parse_parameters: parameters is null.")
        return []

    collected: dict[str, FieldNode] = {}

    for source in parameters:
        param = normalizer.dereference_schema(source)
        if not isinstance(param, dict):
            continue

        location = param.get("in")
        if location == "header":
            continue

        name = param.get("name")
        if not isinstance(name, str):
            logger.debug("parse_parameters: skipping parameter without a name.")
            continue
        if name in collected:
            logger.debug("parse_parameters: dropping duplicate parameter '%s'.", name)
            continue

        schema, refs = normalizer.dereference_with_refs(_parameter_schema(param))
        if not isinstance(schema, dict):
            schema = {}

        # Path parameters are always required in OpenAPI
        required = bool(param.get("required")) or location == "path"

        # A schema description overrides the parameter's own
        item: dict[str, Any] = {
            "description": param.get("description"),
            **{key: value for key, value in schema.items() if key != "required"},
            "name": name,
            "required": required,
            "itemsRequiredNamesList": required_names(schema.get("required")),
        }
        if refs and not item.get("title"):
            item["titRef"] = ref_name(refs)
        if param.get("deprecated") is True:
            item["deprecated"] = True

        seen = frozenset(refs)
        if split_type(schema.get("type"))[0] == "array":
            collected[name] = normalizer.parse_array(item, seen=seen)
        else:
            collected[name] = normalizer.parse_object(item, seen=seen)

    return list(collected.values())


def _parameter_schema(param: dict[str, Any]) -> Any:
    """Return the parameter's ``schema``, or the schema of its first ``content`` entry."""
    if "schema" in param:
        return param["schema"]
    content = param.get("content")
    if isinstance(content, dict):
        for media in content.values():
            if isinstance(media, dict) and "schema" in media:
                return media["schema"]
    return None
