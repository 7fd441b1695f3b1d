"""Shared pytest fixtures for the cache-pagination test suite.

Policies are built with explicit default settings so the suite does not
depend on CP_ environment variables. No external services are required.
"""

from __future__ import annotations

import pytest

from cache_pagination.adapters.memory.store import InMemoryNormalizedStore
from cache_pagination.domain.pagination import concat_pagination, offset_limit_pagination
from cache_pagination.domain.relay import relay_style_pagination
from cache_pagination.settings import PaginationSettings


@pytest.fixture()
def pagination_settings():
    """Default pagination settings, independent of the environment."""
    return PaginationSettings(
        after_arg="after",
        before_arg="before",
        offset_arg="offset",
        empty_has_previous_page=False,
        empty_has_next_page=True,
    )


@pytest.fixture()
def store():
    """An empty in-memory normalized store."""
    return InMemoryNormalizedStore()


@pytest.fixture()
def concat_policy():
    return concat_pagination()


@pytest.fixture()
def offset_policy(pagination_settings):
    return offset_limit_pagination(settings=pagination_settings)


@pytest.fixture()
def relay_policy(pagination_settings):
    return relay_style_pagination(settings=pagination_settings)
