"""Field-function context port interfaces.

Uses typing.Protocol for structural subtyping (not ABCs).
The host normalized cache implements these; ``FieldContext`` in
``domain.models`` and the in-memory store adapter are the bundled
implementations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class ReadFieldContext(Protocol):
    """Capabilities available to a policy's ``read`` function."""

    def read_field(self, field_name: str, container: Any) -> Any:
        """Read ``field_name`` off an inline object or through a reference.

        Returns ``None`` when the field or the referenced entity is missing.
        """
        ...

    def can_read(self, value: Any) -> bool:
        """True if ``value`` currently resolves to a concrete object."""
        ...


@runtime_checkable
class MergeFieldContext(ReadFieldContext, Protocol):
    """Capabilities available to a policy's ``merge`` function."""

    @property
    def args(self) -> Mapping[str, Any] | None:
        """Field arguments of the fetch being merged, if any."""
        ...
