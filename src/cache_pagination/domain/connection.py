"""Helpers shared by the pagination policies.

Pure Python + Pydantic. No policy logic lives here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cache_pagination.domain.models import PageInfo, RelayAggregate
from cache_pagination.settings import PaginationSettings

# Keys owned by the connection algorithm; everything else is an extra.
RESERVED_KEYS = frozenset({"edges", "wrappers", "pageInfo"})


def get_extras(obj: Mapping[str, Any] | RelayAggregate | None) -> dict[str, Any]:
    """Return a copy of ``obj`` without the reserved connection keys."""
    if obj is None:
        return {}
    if isinstance(obj, RelayAggregate):
        return obj.extras()
    return {key: value for key, value in obj.items() if key not in RESERVED_KEYS}


def make_empty_data(settings: PaginationSettings | None = None) -> RelayAggregate:
    """Build the aggregate used when a field has never been merged before."""
    if settings is None:
        settings = PaginationSettings()

    return RelayAggregate(
        wrappers=[],
        page_info=PageInfo(
            has_previous_page=settings.empty_has_previous_page,
            has_next_page=settings.empty_has_next_page,
            start_cursor="",
            end_cursor="",
        ),
    )
