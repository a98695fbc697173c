"""Inspect commands -- browse normalized API trees.

Provides the ``swagtree inspect`` sub-command group.  Every command resolves
the configured sources (or the one given with ``--spec``), loads each
document, normalizes it with :func:`~swagtree.parser.parse_document`, and
presents the grouped interface records as a tree, table, or JSON.
"""

from __future__ import annotations

from typing import Optional, Union

import typer

from swagtree.exceptions import NotFoundError, SwagtreeError
from swagtree.models import FieldNode, GroupRecord, SourceConfig
from swagtree.output import (
    OutputFormat,
    TreeBranch,
    error,
    format_response,
    get_output,
    info,
)

inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_OPTION = typer.Option(
    None, "--spec", "-s", help="Document URL or file path; overrides configured sources."
)
_SOURCE_OPTION = typer.Option(
    None, "--source", help="Title or URL of one configured source."
)


def _load_groups(
    ctx: typer.Context,
    spec: Optional[str],
    source: Optional[str],
) -> list[tuple[SourceConfig, list[GroupRecord]]]:
    """Load and normalize every selected source.

    Raises:
        typer.Exit: With the error's exit code when configuration, loading
            or source selection fails.
    """
    from swagtree.config import resolve_config, select_sources
    from swagtree.parser import load_source, parse_document

    cli_format = ctx.obj.get("format") if ctx.obj else None
    try:
        config = resolve_config(cli_spec=spec, cli_format=cli_format)
        loaded = []
        for src in select_sources(config, source):
            document = load_source(src)
            loaded.append((src, parse_document(document, src, config.default_group)))
    except SwagtreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    return loaded


@inspect_app.command("tree")
def inspect_tree(
    ctx: typer.Context,
    spec: Optional[str] = _SPEC_OPTION,
    source: Optional[str] = _SOURCE_OPTION,
) -> None:
    """Show every source as a tree of tag groups and interfaces.

    Example::

        swagtree inspect tree --spec openapi.yaml
        swagtree --json inspect tree
    """
    loaded = _load_groups(ctx, spec, source)
    output = get_output()

    if output.format == OutputFormat.JSON:
        format_response(
            {
                src.label: [g.model_dump(by_alias=True, exclude_none=True) for g in groups]
                for src, groups in loaded
            }
        )
        return

    for src, groups in loaded:
        branches: list[TreeBranch] = [
            (
                f"{group.title} ({len(group.children)})",
                [
                    (f"{child.method.upper()} {child.path}  {child.title}", [])
                    for child in group.children
                ],
            )
            for group in groups
        ]
        output.print_tree(src.label, branches)


@inspect_app.command("list")
def inspect_list(
    ctx: typer.Context,
    spec: Optional[str] = _SPEC_OPTION,
    source: Optional[str] = _SOURCE_OPTION,
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Only this tag group."),
) -> None:
    """List interfaces with their method, path and derived names.

    Example::

        swagtree inspect list
        swagtree inspect list --group pets --plain
    """
    loaded = _load_groups(ctx, spec, source)

    headers = ["Group", "Method", "Path", "Name", "File", "Title"]
    rows: list[list[str]] = []
    for _, groups in loaded:
        for grp in groups:
            if group is not None and grp.title != group:
                continue
            for child in grp.children:
                rows.append([
                    grp.title,
                    child.method.upper(),
                    child.path,
                    child.path_name,
                    child.file_name,
                    child.title + (" (deprecated)" if child.deprecated else ""),
                ])

    if not rows:
        info("No interfaces found.")
        return
    get_output().print_table(headers, rows, title=f"Interfaces ({len(rows)})")


@inspect_app.command("show")
def inspect_show(
    ctx: typer.Context,
    name: str = typer.Argument(help="Path name, file name, operationId or key of the interface."),
    spec: Optional[str] = _SPEC_OPTION,
    source: Optional[str] = _SOURCE_OPTION,
    fields: bool = typer.Option(
        False, "--fields", help="Draw the parameter and response fields as a tree."
    ),
) -> None:
    """Show the normalized record of one interface.

    The record is printed as JSON with camelCase keys, the form consumed by
    type renderers.

    Example::

        swagtree inspect show getPetById
        swagtree inspect show pets-pet-id --fields
    """
    from swagtree.search import find_interface

    record = None
    for _, groups in _load_groups(ctx, spec, source):
        record = find_interface(groups, name)
        if record is not None:
            break

    if record is None:
        exc = NotFoundError(f"No interface named '{name}'")
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    if not fields:
        format_response(record.model_dump(by_alias=True, exclude_none=True))
        return

    get_output().print_tree(
        f"{record.method.upper()} {record.path}",
        [
            ("params", _field_branches(record.params)),
            ("response", _field_branches(record.response)),
        ],
    )


@inspect_app.command("search")
def inspect_search(
    ctx: typer.Context,
    query: str = typer.Argument(help="Text matched against titles, names and paths."),
    spec: Optional[str] = _SPEC_OPTION,
    source: Optional[str] = _SOURCE_OPTION,
) -> None:
    """Search interfaces across all sources, case-insensitively.

    Example::

        swagtree inspect search pet
    """
    from swagtree.search import build_search_list, search

    entries = []
    for src, groups in _load_groups(ctx, spec, source):
        entries.extend(build_search_list(groups, api_url=src.url, directory=src.label))

    matches = search(entries, query)
    if not matches:
        info(f"No interfaces match '{query}'.")
        return

    rows = [[m.label, m.description, m.detail] for m in matches]
    get_output().print_table(["Title", "Interface", "Path"], rows, title=f"Matches ({len(rows)})")


def _field_branches(value: Union[list[FieldNode], FieldNode, str, None]) -> list[TreeBranch]:
    """Turn a params or response value into tree branches."""
    if value is None:
        return []
    if isinstance(value, str):
        return [(value, [])]
    if isinstance(value, FieldNode):
        if value.name:
            return [_field_branch(value)]
        return [_field_branch(child) for child in value.item or []] or [(_describe(value), [])]
    return [_field_branch(node) for node in value]


def _field_branch(node: FieldNode) -> TreeBranch:
    return (_describe(node), [_field_branch(child) for child in node.item or []])


def _describe(node: FieldNode) -> str:
    type_tag = node.type or "any"
    if node.items_type:
        type_tag = f"{node.items_type}[]"
    label = f"{node.name or '<root>'}{'' if node.required else '?'}: {type_tag}"
    if node.tit_ref:
        label += f" ({node.tit_ref})"
    return label
