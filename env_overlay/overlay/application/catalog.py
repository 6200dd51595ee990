"""Variable catalog — lists the environment variable names a config tree consults."""

from typing import Any

from env_overlay.overlay.application.growth import CollectionGrowthPolicy
from env_overlay.overlay.domain.descriptor import FieldDescriptor, FieldKind, Reflector
from env_overlay.overlay.domain.naming import canonical_name
from env_overlay.overlay.domain.prefix import Prefix
from env_overlay.overlay.domain.settings import OverlaySettings
from env_overlay.overlay.infrastructure.errors import MissingCapabilityError
from env_overlay.overlay.infrastructure.reflection import default_reflector

INDEX_PLACEHOLDER = "{i}"


def variable_catalog(
    value: object,
    prefix: str | Prefix = "",
    reflector: Reflector = default_reflector,
    settings: OverlaySettings | None = None,
) -> list[str]:
    """Return the canonical variable names for every field under *value*.

    Collection indices are shown as ``{i}``, e.g. ``APP__SERVERS__{i}__PORT``.
    Self-referencing types are listed once.
    """
    root = prefix if isinstance(prefix, Prefix) else Prefix(root=prefix)
    names: list[str] = []
    _walk(
        value=value,
        path=root,
        reflector=reflector,
        settings=settings if settings is not None else OverlaySettings(),
        names=names,
        stack=(),
    )
    return names


def _walk(
    value: object,
    path: Prefix,
    reflector: Reflector,
    settings: OverlaySettings,
    names: list[str],
    stack: tuple[type, ...],
) -> None:
    if type(value) in stack:
        return
    stack = (*stack, type(value))

    try:
        descriptors = reflector(value)
    except TypeError as exc:
        raise MissingCapabilityError(path=path.dotted(), reason=str(exc)) from exc

    for descriptor in descriptors:
        field_path = path.child(descriptor.name)
        match descriptor.kind:
            case FieldKind.IGNORED:
                continue
            case FieldKind.SCALAR:
                names.append(_name(field_path, settings=settings))
            case FieldKind.EXTENDABLE_SCALAR:
                names.append(_name(field_path.child(INDEX_PLACEHOLDER), settings=settings))
            case FieldKind.NESTED | FieldKind.OPTIONAL_NESTED:
                child = descriptor.access.get()
                if child is None:
                    child = _default(descriptor=descriptor, path=field_path)
                _walk(child, field_path, reflector, settings, names, stack)
            case FieldKind.EXTENDABLE_NESTED:
                element_path = field_path.child(INDEX_PLACEHOLDER)
                items = descriptor.access.get()
                if items:
                    element = items[0]
                else:
                    element = _default(descriptor=descriptor, path=element_path)
                _walk(element, element_path, reflector, settings, names, stack)


def _default(descriptor: FieldDescriptor, path: Prefix) -> Any:
    return CollectionGrowthPolicy().build_default(
        factory=descriptor.element_factory, path=path.dotted()
    )


def _name(path: Prefix, settings: OverlaySettings) -> str:
    return canonical_name(path, settings=settings).replace(
        INDEX_PLACEHOLDER.upper(), INDEX_PLACEHOLDER
    )
