"""In-memory normalized entity store.

Implements the ``ReadFieldContext`` protocol over a plain dict of entities
keyed by id, so field policies can be driven without a real cache:
- ``Reference`` values resolve against the entity table
- ``evict`` removes entities, making references to them unreadable
- ``extract``/``restore`` snapshot the table as JSON via orjson

Garbage collection and key-argument canonicalization are not modelled.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import orjson
import structlog
from pydantic import BaseModel

from cache_pagination.domain.models import (
    FieldContext,
    Reference,
    RelayAggregate,
    is_reference,
)

if TYPE_CHECKING:
    from cache_pagination.domain.models import FieldPolicy

log = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _default(value: Any) -> Any:
    """orjson fallback for Pydantic models (references, aggregates)."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def _revive(value: Any) -> Any:
    """Turn decoded JSON back into references and aggregates, bottom-up."""
    if isinstance(value, list):
        return [_revive(item) for item in value]
    if not isinstance(value, dict):
        return value

    revived = {key: _revive(item) for key, item in value.items()}
    if set(revived) == {"__ref"}:
        return Reference.model_validate(revived)
    if "wrappers" in revived and "pageInfo" in revived:
        return RelayAggregate.model_validate(revived)
    return revived


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class InMemoryNormalizedStore:
    """Entity table with reference resolution and eviction."""

    def __init__(self, entities: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._entities: dict[str, dict[str, Any]] = {
            entity_id: dict(fields) for entity_id, fields in (entities or {}).items()
        }

    # -- Entities -----------------------------------------------------------

    def write(self, entity_id: str, fields: Mapping[str, Any]) -> Reference:
        """Merge ``fields`` into the entity and return a reference to it."""
        self._entities.setdefault(entity_id, {}).update(fields)
        return Reference(ref=entity_id)

    def get(self, entity_id: str) -> dict[str, Any] | None:
        return self._entities.get(entity_id)

    def has(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def evict(self, entity_id: str) -> bool:
        """Remove an entity. Returns False if it was not stored."""
        removed = self._entities.pop(entity_id, None) is not None
        if removed:
            log.info("memory_store_evicted", entity_id=entity_id)
        return removed

    # -- ReadFieldContext ---------------------------------------------------

    def read_field(self, field_name: str, container: Any) -> Any:
        if is_reference(container):
            container = self._entities.get(container.ref)
        if isinstance(container, Mapping):
            return container.get(field_name)
        return getattr(container, field_name, None)

    def can_read(self, value: Any) -> bool:
        if is_reference(value):
            return self.has(value.ref)
        return value is not None

    def context(self, args: Mapping[str, Any] | None = None) -> FieldContext:
        """Build the context handed to a policy's read/merge functions."""
        return FieldContext(read_field=self.read_field, can_read=self.can_read, args=args)

    # -- Policy application -------------------------------------------------

    def merge_field(
        self,
        entity_id: str,
        store_field_name: str,
        policy: FieldPolicy,
        incoming: Any,
        args: Mapping[str, Any] | None = None,
    ) -> Any:
        """Merge ``incoming`` into a stored field value and persist the result.

        ``store_field_name`` is the already-canonicalized storage key.
        """
        entity = self._entities.setdefault(entity_id, {})
        merged = policy.merge(entity.get(store_field_name), incoming, self.context(args))
        entity[store_field_name] = merged
        return merged

    def read_field_value(
        self,
        entity_id: str,
        store_field_name: str,
        policy: FieldPolicy,
    ) -> Any:
        """Read a stored field value through the policy's ``read``, if any."""
        entity = self._entities.get(entity_id)
        existing = entity.get(store_field_name) if entity is not None else None
        if policy.read is None:
            return existing
        return policy.read(existing, self.context())

    # -- Serialization ------------------------------------------------------

    def extract(self) -> bytes:
        return orjson.dumps(self._entities, default=_default)

    @classmethod
    def restore(cls, data: bytes | str) -> InMemoryNormalizedStore:
        return cls(_revive(orjson.loads(data)))
