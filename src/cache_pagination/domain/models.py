"""Domain models for paginated cache fields.

All models are pure Python + Pydantic v2. Zero framework imports.

Field names are snake_case in Python; the GraphQL connection names
(``pageInfo``, ``hasNextPage``, ...) are kept as aliases so payloads can be
validated and dumped in the shape clients actually receive.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Node references
# ---------------------------------------------------------------------------


class Reference(BaseModel):
    """Opaque pointer to a normalized entity, e.g. ``{"__ref": "User:1"}``.

    Any value that is not a ``Reference`` is an inline value and can be read
    directly; a ``Reference`` must be resolved through ``read_field``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ref: str = Field(alias="__ref")


def is_reference(value: Any) -> bool:
    return isinstance(value, Reference)


# ---------------------------------------------------------------------------
# Connection shapes
# ---------------------------------------------------------------------------


class PageInfo(BaseModel):
    """Relay page-info block.

    Unknown keys are kept so a merge can carry them forward.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    has_previous_page: bool = Field(default=False, alias="hasPreviousPage")
    has_next_page: bool = Field(default=True, alias="hasNextPage")
    start_cursor: str = Field(default="", alias="startCursor")
    end_cursor: str = Field(default="", alias="endCursor")

    def to_payload(self) -> dict[str, Any]:
        """Dump in GraphQL shape (camelCase, extras included)."""
        return self.model_dump(by_alias=True)


class EdgeWrapper(BaseModel):
    """Edge plus a cursor that is always directly readable.

    The edge itself may be a ``Reference``; the cursor is lifted out of it
    (or inferred from page info) at merge time so later merges never have to
    write through a reference.
    """

    model_config = ConfigDict(frozen=True)

    cursor: str | None = None
    edge: Any = None


class RelayAggregate(BaseModel):
    """Everything cached for one relay-style connection field.

    ``wrappers`` is ordered oldest first. Extra keys from fetched payloads
    (``totalCount`` and friends) are stored as model extras.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    wrappers: list[EdgeWrapper] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")

    def extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


# ---------------------------------------------------------------------------
# Field policies
# ---------------------------------------------------------------------------

KeyArgs = Literal[False] | list[str]

ReadField = Callable[[str, Any], Any]
CanRead = Callable[[Any], bool]


@dataclass
class FieldContext:
    """Capabilities the host cache hands to ``read``/``merge``.

    Satisfies both ``ReadFieldContext`` and ``MergeFieldContext``.
    """

    read_field: ReadField
    can_read: CanRead
    args: Mapping[str, Any] | None = field(default=None)


class FieldPolicy(BaseModel):
    """Read/merge pair a normalized cache applies to one field.

    ``key_args`` is never interpreted here; the host cache uses it to decide
    which arguments make up the storage key.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key_args: KeyArgs = False
    merge: Callable[..., Any]
    read: Callable[..., Any] | None = None
