"""Field descriptor protocol — what the overlay engine needs to know about a value.

A configuration value exposes an ordered list of ``FieldDescriptor`` records.
Each names a field, tags it with a ``FieldKind`` and carries an access handle
for reading and writing that field on its owner. Descriptors are built fresh
for every overlay call and never stored.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class FieldKind(Enum):
    SCALAR = "scalar"
    IGNORED = "ignored"
    NESTED = "nested"
    OPTIONAL_NESTED = "optional_nested"
    EXTENDABLE_SCALAR = "extendable_scalar"
    EXTENDABLE_NESTED = "extendable_nested"


@dataclass(frozen=True)
class FieldAccess:
    """Read/write handle for one attribute of an owning value."""

    owner: Any
    attribute: str

    def get(self) -> Any:
        return getattr(self.owner, self.attribute)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.attribute, value)


@dataclass(frozen=True)
class FieldDescriptor:
    """Per-field metadata consumed by the overlay engine.

    ``value_type`` is the parse target for SCALAR fields and the element type
    for EXTENDABLE_SCALAR fields. ``element_factory`` builds a default element
    for extendable and optional-nested fields.
    """

    name: str
    kind: FieldKind
    access: FieldAccess
    value_type: Any = str
    element_factory: Callable[[], Any] | None = None


@runtime_checkable
class Configurable(Protocol):
    """A value that describes its own fields, e.g. with hand-written descriptors."""

    def env_fields(self) -> list[FieldDescriptor]: ...


type Reflector = Callable[[object], list[FieldDescriptor]]


def scalar_field(owner: Any, name: str, value_type: Any = str) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=FieldKind.SCALAR,
        access=FieldAccess(owner=owner, attribute=name),
        value_type=value_type,
    )


def ignored_field(owner: Any, name: str) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=FieldKind.IGNORED,
        access=FieldAccess(owner=owner, attribute=name),
    )


def nested_field(owner: Any, name: str) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=FieldKind.NESTED,
        access=FieldAccess(owner=owner, attribute=name),
    )


def optional_nested_field(
    owner: Any, name: str, factory: Callable[[], Any]
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=FieldKind.OPTIONAL_NESTED,
        access=FieldAccess(owner=owner, attribute=name),
        element_factory=factory,
    )


def extendable_field(
    owner: Any,
    name: str,
    element_type: Any = str,
    factory: Callable[[], Any] | None = None,
) -> FieldDescriptor:
    """Describe a list of scalars; new slots default to ``element_type()``."""
    return FieldDescriptor(
        name=name,
        kind=FieldKind.EXTENDABLE_SCALAR,
        access=FieldAccess(owner=owner, attribute=name),
        value_type=element_type,
        element_factory=factory if factory is not None else element_type,
    )


def extendable_nested_field(
    owner: Any, name: str, factory: Callable[[], Any]
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=FieldKind.EXTENDABLE_NESTED,
        access=FieldAccess(owner=owner, attribute=name),
        element_factory=factory,
    )
