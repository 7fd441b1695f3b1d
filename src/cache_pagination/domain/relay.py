"""Relay-style cursor pagination policy.

Pure domain module. The cached value for a connection field is a
``RelayAggregate``: an ordered list of ``EdgeWrapper`` objects plus page
info. ``merge`` splices each fetched page into that list using the
``after``/``before`` argument as an anchor; ``read`` projects the aggregate
back into the GraphQL connection shape, skipping nodes that no longer
resolve.

Splice rules, in priority order:

1. ``after`` set: keep stored wrappers up to and including the anchor,
   then the incoming page. Stored wrappers past the anchor are stale and
   dropped. If the anchor is unknown, the page is appended to everything.
2. ``before`` set: the incoming page, then stored wrappers from the anchor
   on. If the anchor is unknown, the page is prepended to everything.
3. Neither set but the page has edges: the page replaces the stored list.
   There is no anchor to splice against, so earlier pages are discarded.
4. Neither set and no edges (page-info-only fetch): stored list is kept.

``hasPreviousPage`` is only taken from the incoming page when nothing is
kept in front of it, and ``hasNextPage`` only when nothing is kept after it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog

from cache_pagination.domain.connection import get_extras, make_empty_data
from cache_pagination.domain.models import (
    EdgeWrapper,
    FieldPolicy,
    KeyArgs,
    PageInfo,
    RelayAggregate,
)
from cache_pagination.settings import PaginationSettings

if TYPE_CHECKING:
    from cache_pagination.ports.field_context import MergeFieldContext, ReadFieldContext

log = structlog.get_logger(__name__)


def _find_cursor(wrappers: list[EdgeWrapper], cursor: Any) -> int:
    for index, wrapper in enumerate(wrappers):
        if wrapper.cursor == cursor:
            return index
    return -1


def _page_info_payload(value: Any) -> Mapping[str, Any] | None:
    """Incoming page info as a mapping; a validated ``PageInfo`` keeps only set keys."""
    if isinstance(value, PageInfo):
        return value.model_dump(by_alias=True, exclude_unset=True)
    return value


def _wrap_incoming(
    incoming: Mapping[str, Any],
    incoming_page_info: Mapping[str, Any] | None,
    context: MergeFieldContext,
) -> list[EdgeWrapper]:
    """Wrap incoming edges, lifting cursors out of (possibly referenced) edges.

    Boundary cursors missing from the edges themselves are inferred from
    ``pageInfo.startCursor``/``endCursor``.
    """
    edges = incoming.get("edges") or []
    cursors: list[str | None] = [context.read_field("cursor", edge) for edge in edges]

    if incoming_page_info and cursors:
        start_cursor = incoming_page_info.get("startCursor")
        end_cursor = incoming_page_info.get("endCursor")
        first_missing = not cursors[0]
        last_missing = not cursors[-1]
        if start_cursor and first_missing:
            cursors[0] = start_cursor
        # With a single edge the end cursor wins.
        if end_cursor and last_missing:
            cursors[-1] = end_cursor

    return [
        EdgeWrapper(cursor=cursor, edge=edge) for cursor, edge in zip(cursors, edges, strict=True)
    ]


def _merge_page_info(
    existing: PageInfo,
    incoming_page_info: Mapping[str, Any] | None,
    wrappers: list[EdgeWrapper],
    prefix_empty: bool,
    suffix_empty: bool,
) -> PageInfo:
    # Stored values win; incoming only fills keys the aggregate never had.
    merged: dict[str, Any] = dict(incoming_page_info or {})
    merged.update(existing.to_payload())
    merged["startCursor"] = (wrappers[0].cursor or "") if wrappers else ""
    merged["endCursor"] = (wrappers[-1].cursor or "") if wrappers else ""

    if incoming_page_info:
        has_previous = incoming_page_info.get("hasPreviousPage")
        has_next = incoming_page_info.get("hasNextPage")
        if prefix_empty and has_previous is not None:
            merged["hasPreviousPage"] = has_previous
        if suffix_empty and has_next is not None:
            merged["hasNextPage"] = has_next

    return PageInfo.model_validate(merged)


def relay_style_pagination(
    key_args: KeyArgs = False,
    settings: PaginationSettings | None = None,
) -> FieldPolicy:
    """Build a field policy for a Relay connection field.

    Args:
        key_args: Passed through to the host cache untouched.
        settings: Argument names and empty-aggregate defaults. Read from the
            environment when omitted.
    """
    if settings is None:
        settings = PaginationSettings()
    after_arg = settings.after_arg
    before_arg = settings.before_arg

    def read(
        existing: RelayAggregate | None,
        context: ReadFieldContext,
    ) -> dict[str, Any] | None:
        if existing is None:
            return None

        edges: list[Any] = []
        start_cursor = ""
        end_cursor = ""
        for wrapper in existing.wrappers:
            # The edge may itself be a reference, so go through read_field.
            if not context.can_read(context.read_field("node", wrapper.edge)):
                continue
            edges.append(wrapper.edge)
            if wrapper.cursor:
                start_cursor = start_cursor or wrapper.cursor
                end_cursor = wrapper.cursor

        skipped = len(existing.wrappers) - len(edges)
        if skipped:
            log.debug("relay_read_skipped_unreadable", skipped=skipped, kept=len(edges))

        page_info = existing.page_info.to_payload()
        page_info["startCursor"] = start_cursor
        page_info["endCursor"] = end_cursor

        return {
            **get_extras(existing),
            "edges": edges,
            "pageInfo": page_info,
        }

    def merge(
        existing: RelayAggregate | None,
        incoming: Mapping[str, Any],
        context: MergeFieldContext,
    ) -> RelayAggregate:
        if existing is None:
            existing = make_empty_data(settings)

        incoming_page_info = _page_info_payload(incoming.get("pageInfo"))
        incoming_wrappers = _wrap_incoming(incoming, incoming_page_info, context)
        args = context.args or {}
        after = args.get(after_arg)
        before = args.get(before_arg)

        prefix = list(existing.wrappers)
        suffix: list[EdgeWrapper] = []

        if after:
            index = _find_cursor(prefix, after)
            if index >= 0:
                prefix = prefix[: index + 1]
            else:
                log.debug(
                    "relay_anchor_not_found",
                    direction="after",
                    anchor=after,
                    wrapper_count=len(prefix),
                )
        elif before:
            index = _find_cursor(prefix, before)
            if index >= 0:
                suffix = prefix[index:]
            else:
                log.debug(
                    "relay_anchor_not_found",
                    direction="before",
                    anchor=before,
                    wrapper_count=len(prefix),
                )
                suffix = prefix
            prefix = []
        elif incoming.get("edges") is not None:
            if prefix:
                log.debug("relay_incoming_replaces_existing", discarded=len(prefix))
            prefix = []

        wrappers = [*prefix, *incoming_wrappers, *suffix]
        page_info = _merge_page_info(
            existing.page_info,
            incoming_page_info,
            wrappers,
            prefix_empty=not prefix,
            suffix_empty=not suffix,
        )

        return RelayAggregate(
            **{**get_extras(existing), **get_extras(incoming)},
            wrappers=wrappers,
            pageInfo=page_info,
        )

    return FieldPolicy(key_args=key_args, read=read, merge=merge)
