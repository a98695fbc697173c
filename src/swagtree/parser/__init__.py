"""OpenAPI normalization engine -- load documents and build grouped type trees.

Turns a raw OpenAPI 3.x document (JSON or YAML, local file or remote URL)
into a list of :class:`~swagtree.models.GroupRecord` objects whose interface
records carry normalized :class:`~swagtree.models.FieldNode` trees.

Typical usage::

    from swagtree.parser import load_spec, validate_openapi_version, parse_document

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    validate_openapi_version(raw)
    groups = parse_document(raw)

Sub-modules, leaf-first:

* :mod:`~swagtree.parser.pointer` -- single ``$ref`` pointer lookup.
* :mod:`~swagtree.parser.schema` -- schema dereferencing and normalization,
  ``allOf`` merging.
* :mod:`~swagtree.parser.parameters` -- parameter collection and dedup.
* :mod:`~swagtree.parser.bodies` -- request body and response extraction.
* :mod:`~swagtree.parser.walker` -- operation and document walkers.
* :mod:`~swagtree.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection and version validation.
"""

from swagtree.parser.loader import load_source, load_spec, validate_openapi_version
from swagtree.parser.schema import SchemaNormalizer, merge_all_of
from swagtree.parser.walker import parse_document, parse_operation

__all__ = [
    "load_source",
    "load_spec",
    "validate_openapi_version",
    "SchemaNormalizer",
    "merge_all_of",
    "parse_document",
    "parse_operation",
]
