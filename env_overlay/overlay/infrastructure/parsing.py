"""Scalar parsing — converts a raw environment string into a typed field value.

Dispatch by target type:

* types with a ``from_env_string`` classmethod parse themselves;
* ``codecs.CodecInfo`` targets resolve encoding labels via ``codecs.lookup``;
* everything else goes through a cached pydantic ``TypeAdapter`` in lax mode,
  which covers int, float, bool, str, Path, Enum, Decimal, datetime, Literal
  and Optional wrappers of those.
"""

import codecs
from typing import Any, Protocol, Self

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from env_overlay.overlay.infrastructure.errors import (
    MissingCapabilityError,
    NonUnicodeValueError,
    ParseError,
)


class EnvParseable(Protocol):
    """A type that knows how to build itself from an environment string."""

    @classmethod
    def from_env_string(cls, raw: str) -> Self: ...


_ADAPTERS: dict[Any, TypeAdapter[Any]] = {}


def parse_scalar(raw: str, target_type: Any, name: str) -> Any:
    """Convert *raw* into *target_type*.

    Raises:
        NonUnicodeValueError: if *raw* carries undecodable bytes.
        ParseError: if *raw* does not conform to *target_type*.
        MissingCapabilityError: if *target_type* cannot be parsed from a string at all.
    """
    _ensure_unicode(raw=raw, name=name)

    hook = getattr(target_type, "from_env_string", None)
    if callable(hook):
        try:
            return hook(raw)
        except (TypeError, ValueError) as exc:
            raise ParseError(name=name, raw_value=raw, cause=exc) from exc

    if target_type is codecs.CodecInfo:
        try:
            return codecs.lookup(raw)
        except LookupError as exc:
            raise ParseError(name=name, raw_value=raw, cause=exc) from exc

    adapter = _adapter_for(target_type=target_type, name=name)
    try:
        return adapter.validate_python(raw)
    except ValidationError as exc:
        raise ParseError(name=name, raw_value=raw, cause=exc) from exc


def _ensure_unicode(raw: str, name: str) -> None:
    # os.environ smuggles undecodable bytes through as lone surrogates.
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise NonUnicodeValueError(name=name) from exc


def _adapter_for(target_type: Any, name: str) -> TypeAdapter[Any]:
    cacheable = _is_hashable(target_type)
    if cacheable and target_type in _ADAPTERS:
        return _ADAPTERS[target_type]

    try:
        adapter: TypeAdapter[Any] = TypeAdapter(target_type)
    except PydanticSchemaGenerationError as exc:
        raise MissingCapabilityError(
            path=name,
            reason=f"type {target_type!r} cannot be parsed from a string",
        ) from exc

    if cacheable:
        _ADAPTERS[target_type] = adapter
    return adapter


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True
