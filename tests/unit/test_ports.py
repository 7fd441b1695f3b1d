"""Structural checks for the field-context protocols."""

from __future__ import annotations

from cache_pagination.adapters.memory.store import InMemoryNormalizedStore
from cache_pagination.domain.models import FieldContext
from cache_pagination.ports.field_context import MergeFieldContext, ReadFieldContext


class TestFieldContextProtocols:
    def test_field_context_satisfies_both(self) -> None:
        context = FieldContext(read_field=lambda name, obj: None, can_read=bool, args={})
        assert isinstance(context, ReadFieldContext)
        assert isinstance(context, MergeFieldContext)

    def test_store_is_a_read_context_only(self) -> None:
        store = InMemoryNormalizedStore()
        assert isinstance(store, ReadFieldContext)
        assert not isinstance(store, MergeFieldContext)

    def test_store_context_is_a_merge_context(self) -> None:
        assert isinstance(InMemoryNormalizedStore().context(), MergeFieldContext)
