"""Derive file names, path names and keys for interface records.

An operation on ``/api/v3/pet/findByStatus`` is saved as
``pet-find-by-status.d.ts`` and exported as ``petFindByStatus``.  The naming
pipeline is:

1. **Strip base path** -- remove the source's configured ``base_path``
   prefix (only at segment boundaries).
2. **Tail** -- keep the last two segments, dropping the braces of path
   parameters (``{id}`` -> ``id``).
3. **Method suffix** -- when a path item declares several methods, append
   the method so file names stay unique.
4. **Kebab-case** -- split camelCase words and collapse everything that is
   not a letter or digit into single dashes.

Keys are deterministic: the same document always yields the same keys.
"""

from __future__ import annotations

import hashlib
import re
from typing import Optional

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_WORD = re.compile(r"[^A-Za-z0-9]+")
_BRACES = re.compile(r"[{}]")


def get_kebab_name_by_path(
    path: str, base_path: str = "", method: Optional[str] = None
) -> str:
    """Build the kebab-case file name of an operation.

    Args:
        path: The API path (e.g., ``"/api/v3/users/{id}"``).
        base_path: Prefix to strip before naming.
        method: HTTP method to append, or ``None`` when the path item has a
            single method.

    Returns:
        A kebab-case name such as ``"users-id"`` or ``"users-id-get"``.

    Example::

        >>> get_kebab_name_by_path("/pet/findByStatus")
        'pet-find-by-status'
        >>> get_kebab_name_by_path("/api/users/{id}", "/api", "delete")
        'users-id-delete'
    """
    segments = _split_segments(_strip_prefix(path, base_path))
    words = [_BRACES.sub("", segment) for segment in segments[-2:]]
    if method:
        words.append(method.lower())
    return to_kebab("-".join(words)) or "index"


def get_camel_name_by_kebab(kebab: str) -> str:
    """Convert a kebab-case file name into a camelCase identifier.

    >>> get_camel_name_by_kebab("pet-find-by-status")
    'petFindByStatus'
    """
    return to_camel(kebab)


def to_kebab(text: str) -> str:
    """Lower-case *text* with words separated by single dashes."""
    text = _CAMEL_BOUNDARY.sub(r"\1-\2", text)
    return _NON_WORD.sub("-", text).strip("-").lower()


def to_camel(text: str, capitalize: bool = False, sep: str = "-") -> str:
    """Join *sep*-separated words into camelCase (PascalCase with *capitalize*)."""
    words = [word for word in text.split(sep) if word]
    if not words:
        return ""
    result = words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])
    if capitalize:
        result = result[:1].upper() + result[1:]
    return result


def make_key(title: str, seed: str) -> str:
    """Return a stable key of the form ``"<title>-<6 hex digits>"``.

    Args:
        title: Human-readable prefix of the key.
        seed: Text identifying the record; equal seeds give equal keys.
    """
    digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()[:6]
    return f"{title}-{digest}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_segments(path: str) -> list[str]:
    """Split a path into non-empty segments.

    ``"/api/v1/users"`` -> ``["api", "v1", "users"]``
    ``"/"``             -> ``[]``
    """
    return [s for s in path.split("/") if s]


def _strip_prefix(path: str, prefix: str) -> str:
    """Strip *prefix* from *path* at a segment boundary.

    If *path* does not start with *prefix*, it is returned unchanged.
    """
    if not prefix:
        return path

    prefix_segments = _split_segments(prefix)
    path_segments = _split_segments(path)

    if path_segments[: len(prefix_segments)] != prefix_segments:
        return path

    return "/" + "/".join(path_segments[len(prefix_segments) :])
