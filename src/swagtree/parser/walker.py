"""Walk an OpenAPI document and build grouped interface records.

This is the entry point of the normalization engine.
:func:`parse_document` iterates every path and HTTP method in document order,
delegates each operation to :func:`parse_operation`, and groups the resulting
:class:`~swagtree.models.InterfaceRecord` objects by tag into
:class:`~swagtree.models.GroupRecord` buckets.

Parameter-source precedence differs by method.  ``GET`` reads the declared
``parameters`` and only falls back to ``requestBody`` when there are none;
every other method reads ``requestBody`` first and falls back to
``parameters``.

Path-level parameters apply to every operation under the path; an
operation-level parameter with the same name takes precedence.

Grouping is done with a local accumulator, so walking the same document twice
gives equal results.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from swagtree.models import (
    FieldNode,
    GroupRecord,
    HTTPMethod,
    InterfaceRecord,
    SourceConfig,
)
from swagtree.naming import get_camel_name_by_kebab, get_kebab_name_by_path, make_key
from swagtree.parser.bodies import parse_request_body, parse_response
from swagtree.parser.parameters import parse_parameters
from swagtree.parser.schema import SchemaNormalizer

logger = logging.getLogger(__name__)

# HTTP methods recognized by OpenAPI
_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def parse_document(
    document: dict[str, Any],
    source: Optional[SourceConfig] = None,
    default_group: str = "default",
) -> list[GroupRecord]:
    """Normalize every operation of *document* into tag groups.

    Args:
        document: The loaded OpenAPI v3 document.  It is not modified.
        source: The configured source the document came from.  Supplies the
            group parent key (its URL), display name and base path.
        default_group: Group title for operations that declare no tags.

    Returns:
        Group records in first-encounter order, each holding its interface
        records in document order.  An operation with several tags appears in
        each of their groups.

    Example::

        groups = parse_document(load_spec("petstore.yaml"))
        for group in groups:
            print(group.title, [child.path_name for child in group.children])
    """
    if not isinstance(document, dict):
        logger.warning("parse_document: document is not a mapping.")
        return []

    paths = document.get("paths")
    if not isinstance(paths, dict):
        logger.warning("parse_document: document has no paths.")
        return []

    normalizer = SchemaNormalizer(document)
    parent_key = source.url if source else ""
    base_path = source.base_path if source else ""
    group_name = source.label if source else _document_title(document)

    group_keys: dict[str, str] = {}
    children: dict[str, list[InterfaceRecord]] = {}

    for path, path_item_source in paths.items():
        path_item = normalizer.dereference_schema(path_item_source)
        if not isinstance(path_item, dict):
            continue

        methods = [
            key
            for key, operation in path_item.items()
            if str(key).lower() in _HTTP_METHODS and isinstance(operation, dict)
        ]

        for method in methods:
            record = parse_operation(
                normalizer,
                str(path),
                method,
                path_item[method],
                path_parameters=path_item.get("parameters"),
                multiple_methods=len(methods) > 1,
                base_path=base_path,
                group_name=group_name,
            )
            for tag in record.tags or [default_group]:
                group_key = group_keys.setdefault(
                    tag, make_key(tag, f"{parent_key}:{tag}")
                )
                children.setdefault(tag, []).append(
                    _attach_to_group(record, group_key)
                )

    return [
        GroupRecord(
            title=tag,
            key=group_keys[tag],
            parent_key=parent_key,
            children=records,
        )
        for tag, records in children.items()
    ]


def parse_operation(
    normalizer: SchemaNormalizer,
    path: str,
    method: str,
    operation: dict[str, Any],
    *,
    path_parameters: Optional[list[Any]] = None,
    multiple_methods: bool = False,
    base_path: str = "",
    group_name: str = "",
    parent_key: str = "",
) -> InterfaceRecord:
    """Build the :class:`InterfaceRecord` of one operation.

    Args:
        normalizer: The normalizer bound to the document being walked.
        path: The API path.
        method: The HTTP method key as written in the document.
        operation: The raw operation object.
        path_parameters: Path-level ``parameters`` shared by all methods.
        multiple_methods: Whether the path item declares several methods;
            the method is then appended to the file name.
        base_path: Prefix stripped before deriving names.
        group_name: Display name of the source the record belongs to.
        parent_key: Key of the group the record is attached to.
    """
    file_name = get_kebab_name_by_path(
        path, base_path, method if multiple_methods else None
    )
    path_name = get_camel_name_by_kebab(file_name)
    title = _text(operation.get("description")) or _text(operation.get("summary")) or path_name

    parameters = _merge_parameters(path_parameters, operation.get("parameters"))
    request_body = operation.get("requestBody")

    params: Union[list[FieldNode], FieldNode, None] = []
    if method.upper() == "GET":
        if parameters is not None:
            params = parse_parameters(normalizer, parameters)
        elif request_body is not None:
            params = parse_request_body(normalizer, request_body)
    else:
        if request_body is not None:
            params = parse_request_body(normalizer, request_body)
        elif parameters is not None:
            params = parse_parameters(normalizer, parameters)

    operation_id = operation.get("operationId")

    return InterfaceRecord(
        method=method.lower(),
        path=path,
        path_name=path_name,
        file_name=file_name,
        operation_id=str(operation_id) if operation_id is not None else None,
        params=params,
        response=parse_response(normalizer, operation.get("responses")),
        title=title,
        sub_title=path,
        key=make_key(title, f"{parent_key}:{method.lower()}:{path}"),
        parent_key=parent_key,
        group_name=group_name,
        base_path=base_path,
        tags=_tags(operation.get("tags")),
        deprecated=operation.get("deprecated") is True,
    )


def _attach_to_group(record: InterfaceRecord, group_key: str) -> InterfaceRecord:
    """Return a copy of *record* keyed under the group *group_key*."""
    return record.model_copy(
        update={
            "parent_key": group_key,
            "key": make_key(record.title, f"{group_key}:{record.method}:{record.path}"),
        }
    )


def _merge_parameters(
    path_params: Optional[list[Any]],
    op_params: Optional[list[Any]],
) -> Optional[list[Any]]:
    """Combine operation-level and path-level parameters.

    Operation-level entries come first so that deduplication by name in
    :func:`~swagtree.parser.parameters.parse_parameters` lets them override
    path-level ones.  Returns ``None`` when neither level declares any.
    """
    if not isinstance(path_params, list):
        path_params = None
    if not isinstance(op_params, list):
        op_params = None
    if path_params is None and op_params is None:
        return None
    return [*(op_params or []), *(path_params or [])]


def _document_title(document: dict[str, Any]) -> str:
    info = document.get("info")
    if isinstance(info, dict) and info.get("title"):
        return str(info["title"])
    return ""


def _tags(tags: Any) -> list[str]:
    """Declared tags without blanks or repeats, in declaration order."""
    if not isinstance(tags, list):
        return []
    return list(dict.fromkeys(tag for tag in tags if isinstance(tag, str) and tag))


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""
