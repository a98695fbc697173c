"""Canonical Pydantic models shared across all swagtree modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`SourceConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

**Parser output models** -- produced by the normalization engine and consumed
by renderers and the CLI:
    :class:`HTTPMethod`, :class:`FieldNode`, :class:`InterfaceRecord`,
    :class:`GroupRecord` and :class:`SearchEntry`.

Parser output models are frozen: a record is built once during a document walk
and never changed afterwards. They serialise with the camelCase field names
renderers expect (``itemsType``, ``pathName``, ...) via
``model_dump(by_alias=True)``, while Python code uses the snake_case names.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class SourceConfig(BaseModel):
    """One configured OpenAPI document location.

    Example::

        SourceConfig(
            url="https://petstore3.swagger.io/api/v3/openapi.json",
            title="Petstore",
            base_path="/api/v3",
        )
    """

    url: str = Field(description="URL or file path of the OpenAPI document")
    title: Optional[str] = Field(
        default=None, description="Display name; defaults to the URL"
    )
    link: Optional[str] = Field(
        default=None, description="Human-facing documentation link"
    )
    base_path: str = Field(
        default="", description="Prefix stripped from paths when naming files"
    )

    @property
    def label(self) -> str:
        """Display name of the source."""
        return self.title or self.url


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/swagtree/config.json``.

    Loaded and saved by :func:`~swagtree.config.load_global_config` and
    :func:`~swagtree.config.save_global_config`. See
    :func:`~swagtree.config.resolve_config` for the full precedence chain.
    """

    sources: list[SourceConfig] = Field(default_factory=list)
    default_group: str = Field(
        default="default", description="Group title for operations without tags"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Parser Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class FieldNode(BaseModel):
    """Normalized form of one schema, property or parameter.

    Every schema encoding (inline object, ``$ref``, array of references,
    ``allOf`` composition) collapses into this shape. ``required`` describes the
    relationship with the *parent* node; ``items_required_names_list`` is the
    list that governed this node's own children.

    A node either carries ``item`` (its ordered children) or is a leaf with
    ``item`` left as ``None``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    required: Optional[bool] = None
    type: Optional[str] = None
    items_type: Optional[str] = Field(default=None, alias="itemsType")
    items_required_names_list: Optional[list[str]] = Field(
        default=None, alias="itemsRequiredNamesList"
    )
    item: Optional[list[FieldNode]] = None
    description: Optional[str] = None
    tit_ref: Optional[str] = Field(default=None, alias="titRef")
    format: Optional[str] = None
    enum: Optional[list[Any]] = None
    default: Any = None
    example: Any = None
    nullable: Optional[bool] = None
    deprecated: Optional[bool] = None

    @property
    def is_leaf(self) -> bool:
        """Whether this node has no structured children."""
        return self.item is None


class InterfaceRecord(BaseModel):
    """One normalized HTTP operation (path + method).

    ``params`` is a list of parameter nodes when the operation's parameters
    were used, a single body node when its request body was used, or ``None``
    when the chosen source could not be resolved. ``response`` is a node tree
    or a bare type string such as ``"number"`` or ``"any"``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = "interface"
    method: str
    path: str
    path_name: str = Field(alias="pathName")
    file_name: str = Field(alias="fileName")
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    params: Union[list[FieldNode], FieldNode, None] = None
    response: Union[FieldNode, str] = "any"
    title: str
    sub_title: str = Field(alias="subTitle")
    key: str
    parent_key: str = Field(default="", alias="parentKey")
    group_name: str = Field(default="", alias="groupName")
    base_path: str = Field(default="", alias="basePath")
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False


class GroupRecord(BaseModel):
    """A tag-named bucket of :class:`InterfaceRecord` objects."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = "group"
    title: str
    key: str
    parent_key: str = Field(default="", alias="parentKey")
    children: list[InterfaceRecord] = Field(default_factory=list)


class SearchEntry(BaseModel):
    """One pickable row of the flattened search list.

    See Also:
        :func:`~swagtree.search.build_search_list`.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    description: str
    detail: str
    source: InterfaceRecord
    api_url: str = ""
    group_title: str = ""
