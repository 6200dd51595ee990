"""Collection growth policy for extendable fields."""

from collections.abc import Callable, MutableSequence
from typing import Any

from env_overlay.overlay.infrastructure.errors import MissingCapabilityError


class CollectionGrowthPolicy:
    """Grows extendable collections lazily; never shrinks them."""

    def ensure_length(
        self,
        items: object,
        length: int,
        factory: Callable[[], Any] | None,
        path: str,
    ) -> int:
        """Append default elements until ``len(items) >= length``.

        Returns the number of elements appended.

        Raises:
            MissingCapabilityError: if *items* is not a mutable sequence or
                *factory* cannot build a default element.
        """
        sequence = self.as_sequence(items=items, path=path)
        appended = 0
        while len(sequence) < length:
            sequence.append(self.build_default(factory=factory, path=path))
            appended += 1
        return appended

    def place(
        self,
        items: object,
        index: int,
        value: Any,
        factory: Callable[[], Any] | None,
        path: str,
    ) -> int:
        """Store *value* at *index*, growing the collection to ``index + 1`` if needed.

        Returns the number of elements appended.
        """
        sequence = self.as_sequence(items=items, path=path)
        if index < len(sequence):
            sequence[index] = value
            return 0
        appended = self.ensure_length(
            items=sequence, length=index, factory=factory, path=path
        )
        sequence.append(value)
        return appended + 1

    def as_sequence(self, items: object, path: str) -> MutableSequence[Any]:
        if not isinstance(items, MutableSequence):
            raise MissingCapabilityError(
                path=path,
                reason=f"expected a mutable sequence, found {type(items).__name__}",
            )
        return items

    def build_default(self, factory: Callable[[], Any] | None, path: str) -> Any:
        if factory is None:
            raise MissingCapabilityError(
                path=path, reason="no default element factory is available"
            )
        try:
            return factory()
        except (TypeError, ValueError) as exc:
            raise MissingCapabilityError(
                path=path, reason=f"cannot build a default element: {exc}"
            ) from exc
