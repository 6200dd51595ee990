"""EnvironmentView — read-only, case-insensitive lookup over an environment mapping."""

from collections.abc import Iterable, Mapping


class EnvironmentView:
    """Wraps a name -> value mapping without copying or mutating it.

    An exact key match wins. Otherwise the first key, in mapping order, whose
    upper-cased form equals the upper-cased name is used.
    """

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ
        self._folded: dict[str, str] = {}
        for key in environ:
            self._folded.setdefault(key.upper(), key)

    def lookup(self, names: Iterable[str]) -> tuple[str, str] | None:
        """Return ``(name, raw_value)`` for the first present name, else None."""
        for name in names:
            key = self._resolve_key(name)
            if key is not None:
                return name, self._environ[key]
        return None

    def contains_any(self, names: Iterable[str]) -> bool:
        return any(self._resolve_key(name) is not None for name in names)

    def has_prefix(self, prefixes: Iterable[str]) -> bool:
        """Return True if any variable name starts with one of *prefixes* (case-insensitive)."""
        folded = tuple(prefix.upper() for prefix in prefixes)
        return any(key.startswith(folded) for key in self._folded)

    def _resolve_key(self, name: str) -> str | None:
        if name in self._environ:
            return name
        return self._folded.get(name.upper())
