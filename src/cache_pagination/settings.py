"""Library settings via Pydantic BaseSettings.

All configuration uses the CP_PAGINATION_ environment variable prefix. Policies take
an optional settings object; when none is passed they read the environment.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings


class PaginationSettings(BaseSettings):
    """Argument names and empty-aggregate defaults for pagination policies."""

    model_config = {"env_prefix": "CP_PAGINATION_"}

    # Argument names interpreted by the offset and relay policies
    after_arg: str = "after"
    before_arg: str = "before"
    offset_arg: str = "offset"

    # Page-info flags of a freshly created aggregate
    empty_has_previous_page: bool = False
    empty_has_next_page: bool = True
