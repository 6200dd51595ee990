"""Reflection — builds field descriptors for pydantic models and dataclasses.

Kinds are inferred from annotations:

* a sub-model or dataclass field is NESTED, ``Optional`` of one is OPTIONAL_NESTED;
* ``list`` of sub-models is EXTENDABLE_NESTED, ``list`` of anything else is
  EXTENDABLE_SCALAR;
* everything else is SCALAR.

``Annotated[..., EnvIgnore()]`` skips a field and ``Annotated[..., EnvName("x")]``
overrides the identifier used in the variable name.
"""

import dataclasses
import types
import typing
from collections.abc import Callable, MutableSequence
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from env_overlay.overlay.domain.descriptor import (
    Configurable,
    FieldAccess,
    FieldDescriptor,
    FieldKind,
)


@dataclasses.dataclass(frozen=True)
class EnvIgnore:
    """Marks a field that is never read from the environment."""


@dataclasses.dataclass(frozen=True)
class EnvName:
    """Overrides the identifier a field contributes to its variable name."""

    name: str


def default_reflector(value: object) -> list[FieldDescriptor]:
    """Describe *value*'s fields in declaration order.

    Raises:
        TypeError: if *value* cannot be described or cannot be mutated in place.
    """
    if isinstance(value, Configurable):
        return list(value.env_fields())
    if isinstance(value, BaseModel):
        return _describe_model(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _describe_dataclass(value)
    raise TypeError(f"{type(value).__name__} does not expose its fields")


def is_config_type(annotation: Any) -> bool:
    """Return True when *annotation* is a class the reflector can describe."""
    if not isinstance(annotation, type) or get_origin(annotation) is not None:
        return False
    return (
        issubclass(annotation, BaseModel)
        or dataclasses.is_dataclass(annotation)
        or hasattr(annotation, "env_fields")
    )


def _describe_model(model: BaseModel) -> list[FieldDescriptor]:
    model_type = type(model)
    if model_type.model_config.get("frozen"):
        raise TypeError(f"{model_type.__name__} is frozen and cannot be overlaid")

    descriptors: list[FieldDescriptor] = []
    for attribute, info in model_type.model_fields.items():
        descriptors.append(
            _describe(
                owner=model,
                attribute=attribute,
                annotation=info.annotation,
                metadata=info.metadata,
            )
        )
    return descriptors


def _describe_dataclass(instance: Any) -> list[FieldDescriptor]:
    instance_type = type(instance)
    if instance_type.__dataclass_params__.frozen:
        raise TypeError(f"{instance_type.__name__} is frozen and cannot be overlaid")

    hints = get_type_hints(instance_type, include_extras=True)
    descriptors: list[FieldDescriptor] = []
    for field in dataclasses.fields(instance):
        annotation, metadata = _split_annotated(hints.get(field.name, Any))
        descriptors.append(
            _describe(
                owner=instance,
                attribute=field.name,
                annotation=annotation,
                metadata=metadata,
            )
        )
    return descriptors


def _describe(
    owner: Any, attribute: str, annotation: Any, metadata: list[Any]
) -> FieldDescriptor:
    access = FieldAccess(owner=owner, attribute=attribute)
    name = attribute
    constraints: list[Any] = []
    for marker in metadata:
        if isinstance(marker, EnvName):
            name = marker.name
        elif isinstance(marker, EnvIgnore):
            return FieldDescriptor(name=name, kind=FieldKind.IGNORED, access=access)
        else:
            constraints.append(marker)

    inner, optional = _unwrap_optional(annotation)

    if is_config_type(inner):
        kind = FieldKind.OPTIONAL_NESTED if optional else FieldKind.NESTED
        return FieldDescriptor(
            name=name, kind=kind, access=access, value_type=inner, element_factory=inner
        )

    if _is_list(inner):
        args = get_args(inner)
        element_annotation = args[0] if args else str
        element_type, _ = _split_annotated(element_annotation)
        if is_config_type(element_type):
            return FieldDescriptor(
                name=name,
                kind=FieldKind.EXTENDABLE_NESTED,
                access=access,
                value_type=element_type,
                element_factory=element_type,
            )
        return FieldDescriptor(
            name=name,
            kind=FieldKind.EXTENDABLE_SCALAR,
            access=access,
            value_type=element_annotation,
            element_factory=_scalar_factory(element_type),
        )

    return FieldDescriptor(
        name=name,
        kind=FieldKind.SCALAR,
        access=access,
        value_type=_constrained(annotation, constraints),
    )


def _constrained(annotation: Any, constraints: list[Any]) -> Any:
    """Re-attach field constraints (gt, max_length, pattern, ...) to the parse target."""
    if not constraints:
        return annotation
    return Annotated[annotation, *constraints]


def _split_annotated(annotation: Any) -> tuple[Any, list[Any]]:
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        return base, list(metadata)
    return annotation, []


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    if get_origin(annotation) not in (Union, types.UnionType):
        return annotation, False
    members = [arg for arg in get_args(annotation) if arg is not type(None)]
    if len(members) == 1 and len(members) < len(get_args(annotation)):
        return members[0], True
    return annotation, False


def _is_list(annotation: Any) -> bool:
    origin = get_origin(annotation) or annotation
    return isinstance(origin, type) and issubclass(origin, MutableSequence)


def _scalar_factory(element_type: Any) -> Callable[[], Any]:
    if isinstance(element_type, type):
        return element_type
    origin = get_origin(element_type)
    if origin is typing.Literal:
        first = get_args(element_type)[0]
        return lambda: first
    return str
