"""List-shaped pagination policies: concatenation and offset/limit.

Pure domain module. Both merges are pure functions of
(existing, incoming, context); the host cache persists the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from cache_pagination.domain.models import FieldPolicy, KeyArgs
from cache_pagination.settings import PaginationSettings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cache_pagination.ports.field_context import MergeFieldContext

log = structlog.get_logger(__name__)


def concat_pagination(key_args: KeyArgs = False) -> FieldPolicy:
    """Policy that always appends incoming items, ignoring arguments."""

    def merge(
        existing: Sequence[Any] | None,
        incoming: Sequence[Any],
        context: MergeFieldContext | None = None,
    ) -> Sequence[Any]:
        if existing is None:
            return incoming
        return [*existing, *incoming]

    return FieldPolicy(key_args=key_args, merge=merge)


def offset_limit_pagination(
    key_args: KeyArgs = False,
    settings: PaginationSettings | None = None,
) -> FieldPolicy:
    """Policy that writes incoming items starting at ``args.offset``.

    Without an offset the items are appended; a negative offset counts as 0.
    Positions before the offset that were never written hold ``None``.
    """
    if settings is None:
        settings = PaginationSettings()
    offset_arg = settings.offset_arg

    def merge(
        existing: Sequence[Any] | None,
        incoming: Sequence[Any],
        context: MergeFieldContext | None = None,
    ) -> list[Any]:
        merged: list[Any] = list(existing) if existing is not None else []
        args = context.args if context is not None else None

        start = args.get(offset_arg) if args else None
        if start is None:
            start = len(merged)
        start = max(start, 0)

        if start > len(merged):
            log.debug(
                "offset_merge_sparse",
                offset=start,
                existing_length=len(merged),
            )
            merged.extend([None] * (start - len(merged)))

        for i, item in enumerate(incoming):
            position = start + i
            if position < len(merged):
                merged[position] = item
            else:
                merged.append(item)
        return merged

    return FieldPolicy(key_args=key_args, merge=merge)
