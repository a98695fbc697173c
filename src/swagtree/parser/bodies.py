"""Extract request and response payload schemas of an operation.

Both extractors take the **first** media-type entry of a ``content`` map, in
the document's own key order.  There is no preference for
``application/json`` over ``multipart/form-data`` or anything else: the
first entry is what the document author listed first.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from swagtree.models import FieldNode
from swagtree.parser.schema import (
    SchemaNormalizer,
    handle_type,
    split_type,
    with_ref_title,
)

logger = logging.getLogger(__name__)


def parse_request_body(
    normalizer: SchemaNormalizer, request_body: Any
) -> Optional[FieldNode]:
    """Normalize the schema of an operation's ``requestBody``.

    Args:
        normalizer: The normalizer bound to the document being walked.
        request_body: The raw ``requestBody``; may be a ``$ref`` to
            ``components/requestBodies``.

    Returns:
        The root :class:`FieldNode` (named ``""``) of the body schema, or
        ``None`` with a logged warning when the body, its first media-type
        entry, or that entry's schema is missing.
    """
    body = normalizer.dereference_schema(request_body)
    if not isinstance(body, dict):
        logger.warning("parse_request_body: requestBody is null.")
        return None

    media = _first_media(body.get("content"))
    if media is None:
        logger.warning("parse_request_body: requestBody content is null.")
        return None

    schema, refs = normalizer.dereference_with_refs(media.get("schema"))
    if not isinstance(schema, dict):
        logger.warning("parse_request_body: requestBody schema is null.")
        return None

    return normalizer.parse_schema_object(
        with_ref_title(schema, refs), "", seen=frozenset(refs)
    )


def parse_response(
    normalizer: SchemaNormalizer, responses: Any
) -> Union[FieldNode, str]:
    """Normalize the success response of an operation.

    The ``200`` response is preferred, then the first other ``2xx``, then
    ``default``.  Schemas without structure (no ``properties``, no ``allOf``,
    not an array) are reported as a bare primitive type name.

    Returns:
        A :class:`FieldNode` tree, or a type string such as ``"number"``.
        ``"any"`` when no response schema can be found.
    """
    response = normalizer.dereference_schema(_success_response(responses))
    if not isinstance(response, dict):
        return "any"

    media = _first_media(response.get("content"))
    if media is None:
        return "any"

    schema, refs = normalizer.dereference_with_refs(media.get("schema"))
    if not isinstance(schema, dict):
        logger.warning("parse_response: response schema is null.")
        return "any"

    if not _is_structured(schema):
        return handle_type(schema.get("type"))

    return normalizer.parse_schema_object(
        with_ref_title(schema, refs), "", seen=frozenset(refs)
    )


def _first_media(content: Any) -> Optional[dict[str, Any]]:
    """Return the first media-type object of a ``content`` map."""
    if not isinstance(content, dict):
        return None
    media = next(iter(content.values()), None)
    return media if isinstance(media, dict) else None


def _success_response(responses: Any) -> Any:
    if not isinstance(responses, dict):
        return None
    for status in ("200", 200):
        if status in responses:
            return responses[status]
    for status, response in responses.items():
        if str(status).startswith("2"):
            return response
    return responses.get("default")


def _is_structured(schema: dict[str, Any]) -> bool:
    return (
        isinstance(schema.get("properties"), dict)
        or bool(schema.get("allOf"))
        or split_type(schema.get("type"))[0] == "array"
    )
