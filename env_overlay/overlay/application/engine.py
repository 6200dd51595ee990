"""OverlayEngine — applies environment variables onto an existing config value in place."""

import itertools
from collections.abc import Mapping, MutableSequence
from typing import Any

from pydantic import ValidationError

from env_overlay.core.errors import EnvOverlayError
from env_overlay.overlay.application.growth import CollectionGrowthPolicy
from env_overlay.overlay.domain.descriptor import FieldDescriptor, FieldKind, Reflector
from env_overlay.overlay.domain.environment import EnvironmentView
from env_overlay.overlay.domain.naming import names_for, subtree_prefixes
from env_overlay.overlay.domain.observer import OverlayObserver
from env_overlay.overlay.domain.prefix import Prefix
from env_overlay.overlay.domain.settings import OverlaySettings
from env_overlay.overlay.infrastructure.environment import process_environment
from env_overlay.overlay.infrastructure.errors import (
    MissingCapabilityError,
    ParseError,
)
from env_overlay.overlay.infrastructure.observer import StructlogOverlayObserver
from env_overlay.overlay.infrastructure.parsing import parse_scalar
from env_overlay.overlay.infrastructure.reflection import default_reflector


class OverlayEngine:
    """Walks a config value depth-first and overlays every present variable.

    Fields whose variables are absent keep their current value. The first
    error aborts the call; fields applied before it stay applied.
    """

    def __init__(
        self,
        observer: OverlayObserver,
        reflector: Reflector = default_reflector,
        settings: OverlaySettings | None = None,
        growth: CollectionGrowthPolicy | None = None,
    ) -> None:
        self._observer = observer
        self._reflector = reflector
        self._settings = settings if settings is not None else OverlaySettings()
        self._growth = growth if growth is not None else CollectionGrowthPolicy()

    def overlay(
        self,
        value: object,
        prefix: str | Prefix = "",
        environ: Mapping[str, str] | None = None,
    ) -> bool:
        """Overlay *environ* (default: the process environment) onto *value*.

        Returns True if at least one variable was applied.

        Raises:
            ParseError: if a present variable does not convert to its field's type.
            NonUnicodeValueError: if a present variable is not valid unicode.
            MissingCapabilityError: if a nested or extendable field cannot be
                described or grown.
        """
        root = prefix if isinstance(prefix, Prefix) else Prefix(root=prefix)
        env = EnvironmentView(environ if environ is not None else process_environment())
        traversal = _Traversal(
            env=env,
            observer=self._observer,
            reflector=self._reflector,
            settings=self._settings,
            growth=self._growth,
        )

        self._observer.overlay_started(prefix=root.root)
        try:
            traversal.apply(value=value, path=root)
        except EnvOverlayError as exc:
            self._observer.overlay_failed(prefix=root.root, reason=str(exc))
            raise
        self._observer.overlay_completed(prefix=root.root, applied=traversal.applied)
        return traversal.applied > 0


def overlay(
    value: object,
    prefix: str | Prefix = "",
    environ: Mapping[str, str] | None = None,
    *,
    settings: OverlaySettings | None = None,
    reflector: Reflector = default_reflector,
    observer: OverlayObserver | None = None,
) -> bool:
    """Overlay environment variables onto *value* using a structlog-backed engine."""
    engine = OverlayEngine(
        observer=observer if observer is not None else StructlogOverlayObserver(),
        reflector=reflector,
        settings=settings,
    )
    return engine.overlay(value=value, prefix=prefix, environ=environ)


class _Traversal:
    """State for a single overlay call."""

    def __init__(
        self,
        env: EnvironmentView,
        observer: OverlayObserver,
        reflector: Reflector,
        settings: OverlaySettings,
        growth: CollectionGrowthPolicy,
    ) -> None:
        self._env = env
        self._observer = observer
        self._reflector = reflector
        self._settings = settings
        self._growth = growth
        self.applied = 0

    def apply(self, value: object, path: Prefix) -> None:
        for descriptor in self._describe(value=value, path=path):
            field_path = path.child(descriptor.name)
            match descriptor.kind:
                case FieldKind.IGNORED:
                    continue
                case FieldKind.SCALAR:
                    self._apply_scalar(descriptor=descriptor, path=field_path)
                case FieldKind.NESTED:
                    self._apply_nested(descriptor=descriptor, path=field_path)
                case FieldKind.OPTIONAL_NESTED:
                    self._apply_optional_nested(descriptor=descriptor, path=field_path)
                case FieldKind.EXTENDABLE_SCALAR:
                    self._apply_extendable_scalar(descriptor=descriptor, path=field_path)
                case FieldKind.EXTENDABLE_NESTED:
                    self._apply_extendable_nested(descriptor=descriptor, path=field_path)

    def _apply_scalar(self, descriptor: FieldDescriptor, path: Prefix) -> None:
        found = self._env.lookup(names_for(path, settings=self._settings))
        if found is None:
            return
        name, raw = found
        parsed = parse_scalar(raw=raw, target_type=descriptor.value_type, name=name)
        try:
            descriptor.access.set(parsed)
        except ValidationError as exc:
            raise ParseError(name=name, raw_value=raw, cause=exc) from exc
        self._record(name=name, path=path)

    def _apply_nested(self, descriptor: FieldDescriptor, path: Prefix) -> None:
        self.apply(value=descriptor.access.get(), path=path)

    def _apply_optional_nested(self, descriptor: FieldDescriptor, path: Prefix) -> None:
        current = descriptor.access.get()
        if current is None:
            if not self._may_exist(path=path):
                return
            candidate = self._growth.build_default(
                factory=descriptor.element_factory, path=path.dotted()
            )
            if not self._present(value=candidate, path=path):
                return
            self._assign(descriptor=descriptor, value=candidate, path=path)
            current = descriptor.access.get()
        self.apply(value=current, path=path)

    def _apply_extendable_scalar(self, descriptor: FieldDescriptor, path: Prefix) -> None:
        items = descriptor.access.get()
        for index in itertools.count():
            element_path = path.child(index)
            found = self._env.lookup(names_for(element_path, settings=self._settings))
            if found is None:
                return
            name, raw = found
            parsed = parse_scalar(raw=raw, target_type=descriptor.value_type, name=name)
            if items is None:
                items = self._start_collection(descriptor=descriptor, path=path)
            appended = self._growth.place(
                items=items,
                index=index,
                value=parsed,
                factory=descriptor.element_factory,
                path=element_path.dotted(),
            )
            if appended:
                self._observer.overlay_collection_grown(
                    path=path.dotted(), length=index + 1
                )
            self._record(name=name, path=element_path)

    def _apply_extendable_nested(self, descriptor: FieldDescriptor, path: Prefix) -> None:
        items = descriptor.access.get()
        for index in itertools.count():
            element_path = path.child(index)
            if not self._may_exist(path=element_path):
                return
            element = self._element_or_default(
                descriptor=descriptor, items=items, index=index, path=element_path
            )
            if not self._present(value=element, path=element_path):
                return
            if items is None:
                items = self._start_collection(descriptor=descriptor, path=path)
            appended = self._growth.place(
                items=items,
                index=index,
                value=element,
                factory=descriptor.element_factory,
                path=element_path.dotted(),
            )
            if appended:
                self._observer.overlay_collection_grown(
                    path=path.dotted(), length=index + 1
                )
            self.apply(value=element, path=element_path)

    def _start_collection(self, descriptor: FieldDescriptor, path: Prefix) -> Any:
        """Replace a None collection (e.g. ``list[str] | None``) with an empty list."""
        self._assign(descriptor=descriptor, value=[], path=path)
        return descriptor.access.get()

    def _assign(self, descriptor: FieldDescriptor, value: Any, path: Prefix) -> None:
        try:
            descriptor.access.set(value)
        except ValidationError as exc:
            raise MissingCapabilityError(path=path.dotted(), reason=str(exc)) from exc

    def _present(self, value: object, path: Prefix) -> bool:
        """Return True if any variable exists for a field in *value*'s subtree.

        Probing never mutates *value*.
        """
        if not self._may_exist(path=path):
            return False

        for descriptor in self._describe(value=value, path=path):
            field_path = path.child(descriptor.name)
            match descriptor.kind:
                case FieldKind.IGNORED:
                    continue
                case FieldKind.SCALAR:
                    if self._env.contains_any(names_for(field_path, settings=self._settings)):
                        return True
                case FieldKind.NESTED | FieldKind.OPTIONAL_NESTED:
                    child = descriptor.access.get()
                    if child is None and not self._may_exist(path=field_path):
                        continue
                    if child is None:
                        child = self._growth.build_default(
                            factory=descriptor.element_factory, path=field_path.dotted()
                        )
                    if self._present(value=child, path=field_path):
                        return True
                case FieldKind.EXTENDABLE_SCALAR:
                    first = names_for(field_path.child(0), settings=self._settings)
                    if self._env.contains_any(first):
                        return True
                case FieldKind.EXTENDABLE_NESTED:
                    if not self._may_exist(path=field_path.child(0)):
                        continue
                    element = self._element_or_default(
                        descriptor=descriptor,
                        items=descriptor.access.get(),
                        index=0,
                        path=field_path.child(0),
                    )
                    if self._present(value=element, path=field_path.child(0)):
                        return True
        return False

    def _may_exist(self, path: Prefix) -> bool:
        return self._env.has_prefix(subtree_prefixes(path, settings=self._settings))

    def _element_or_default(
        self, descriptor: FieldDescriptor, items: Any, index: int, path: Prefix
    ) -> Any:
        if isinstance(items, MutableSequence) and index < len(items):
            return items[index]
        return self._growth.build_default(
            factory=descriptor.element_factory, path=path.dotted()
        )

    def _describe(self, value: object, path: Prefix) -> list[FieldDescriptor]:
        try:
            return self._reflector(value)
        except TypeError as exc:
            raise MissingCapabilityError(path=path.dotted(), reason=str(exc)) from exc

    def _record(self, name: str, path: Prefix) -> None:
        self.applied += 1
        self._observer.overlay_variable_applied(name=name, path=path.dotted())
