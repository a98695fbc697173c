"""Flatten grouped interface records into a searchable list.

The CLI's ``inspect search`` and ``inspect show`` commands work on a flat view
of every interface across all configured sources.  Each
:class:`~swagtree.models.SearchEntry` carries a one-line label (the interface
title), a description of the form ``<METHOD> [source / group] pathName`` and
the raw path as detail.
"""

from __future__ import annotations

from typing import Optional

from swagtree.models import GroupRecord, InterfaceRecord, SearchEntry


def build_search_list(
    groups: list[GroupRecord], api_url: str = "", directory: str = ""
) -> list[SearchEntry]:
    """Return one :class:`SearchEntry` per interface in *groups*.

    Args:
        groups: Groups produced by :func:`~swagtree.parser.parse_document`.
        api_url: URL of the source the groups were loaded from.
        directory: Prefix shown before the group title, usually the source
            name.
    """
    entries: list[SearchEntry] = []
    for group in groups:
        group_dir = f"{directory} / {group.title}" if directory else group.title
        for record in group.children:
            entries.append(
                SearchEntry(
                    label=record.title,
                    description=f"<{record.method.upper()}> [{group_dir}] {record.path_name}",
                    detail=record.sub_title,
                    source=record,
                    api_url=api_url,
                    group_title=group.title,
                )
            )
    return entries


def search(entries: list[SearchEntry], query: str) -> list[SearchEntry]:
    """Filter *entries* whose label, description or detail contains *query*.

    Matching is case-insensitive.  An empty query matches everything.
    """
    needle = query.strip().lower()
    if not needle:
        return list(entries)
    return [
        entry
        for entry in entries
        if needle in entry.label.lower()
        or needle in entry.description.lower()
        or needle in entry.detail.lower()
    ]


def find_interface(groups: list[GroupRecord], name: str) -> Optional[InterfaceRecord]:
    """Find an interface by its ``path_name``, ``file_name``, ``operation_id`` or ``key``.

    Returns:
        The first matching record, or ``None``.
    """
    for group in groups:
        for record in group.children:
            if name in (record.path_name, record.file_name, record.operation_id, record.key):
                return record
    return None
