"""Resolve ``$ref`` JSON Reference pointers against a loaded document.

OpenAPI documents use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  This module
resolves a *single* pointer string to the node it designates.  It does not
walk or copy the document, and it never follows the node it finds: chasing a
reference to a reference is the caller's job (see
:meth:`~swagtree.parser.schema.SchemaNormalizer.dereference_schema`).

Two lookup modes are offered:

* **tolerant** (default) -- a missing key yields ``None``.  The normalization
  engine only ever uses this mode.
* **strict** -- a missing key raises
  :class:`~swagtree.exceptions.RefResolutionError`.

Pointer syntax follows RFC 6901 (``~1`` for ``/``, ``~0`` for ``~``) with
percent-decoding of the URI fragment.  Bracket indices (``#/tags[0]/name``)
are accepted as well.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import unquote

from swagtree.exceptions import RefResolutionError

_BRACKET_INDEX = re.compile(r"\[(\w+)\]")


def split_pointer(ref: str) -> list[str]:
    """Split a ``#/a/b[0]/c`` pointer into its unescaped key path.

    Args:
        ref: The ``$ref`` string.  The leading ``#`` is optional.

    Returns:
        The list of keys, e.g. ``["a", "b", "0", "c"]``.  The document root
        (``"#"`` or ``"#/"``) is the empty list.
    """
    path = ref[1:] if ref.startswith("#") else ref
    path = _BRACKET_INDEX.sub(r"/\1", path)
    path = path.lstrip("/")
    if not path:
        return []
    return [
        unquote(segment).replace("~1", "/").replace("~0", "~")
        for segment in path.split("/")
    ]


def get_value_by_path(obj: Any, keys: Iterable[str], strict: bool = False) -> Any:
    """Walk *obj* key by key and return the value found.

    Mappings are indexed by key and sequences by integer index.

    Args:
        obj: The root object (usually the whole OpenAPI document).
        keys: The key path, as returned by :func:`split_pointer`.
        strict: Raise instead of returning ``None`` when a key is absent.

    Returns:
        The value at the path, or ``None`` if any key is absent and
        *strict* is false.

    Raises:
        RefResolutionError: If *strict* is true and a key is absent.
    """
    current = obj
    walked: list[str] = []
    for key in keys:
        walked.append(key)
        if isinstance(current, Mapping) and key in current:
            current = current[key]
            continue
        if isinstance(current, Sequence) and not isinstance(current, str):
            try:
                current = current[int(key)]
                continue
            except (ValueError, IndexError):
                pass
        if strict:
            raise RefResolutionError(
                f"Cannot resolve path '/{'/'.join(walked)}': "
                f"key '{key}' not found"
            )
        return None
    return current


def resolve_pointer(document: Any, ref: str, strict: bool = False) -> Any:
    """Resolve a single ``$ref`` string against *document*.

    Example::

        resolve_pointer(doc, "#/components/schemas/Pet")
        # -> {"type": "object", "properties": {...}}

    Args:
        document: The loaded OpenAPI document.
        ref: The reference string.  Only internal references (``#...``) can
            be resolved.
        strict: Raise instead of returning ``None`` on failure.

    Returns:
        The referenced node, or ``None`` when it cannot be found and
        *strict* is false.

    Raises:
        RefResolutionError: If *strict* is true and the reference is external
            or points to a missing key.
    """
    if not isinstance(ref, str) or not ref.startswith("#"):
        if strict:
            raise RefResolutionError(
                f"External $ref not supported: {ref}. "
                "Only internal references (#/...) are handled."
            )
        return None
    try:
        return get_value_by_path(document, split_pointer(ref), strict=strict)
    except RefResolutionError as exc:
        raise RefResolutionError(f"Cannot resolve $ref '{ref}': {exc}") from exc
