"""Name resolution — maps a field path onto environment variable names.

``Config.server.port`` under root prefix ``APP`` resolves to ``APP__SERVER__PORT``
and, as a legacy fallback, ``APP_SERVER_PORT``. Collection indices are plain
decimal segments: ``APP__SERVERS__0__PORT``.
"""

from env_overlay.overlay.domain.prefix import Prefix, Segment
from env_overlay.overlay.domain.settings import OverlaySettings

_DEFAULT_SETTINGS = OverlaySettings()


def candidate_names(
    prefix: Prefix,
    field_identifier: Segment,
    settings: OverlaySettings = _DEFAULT_SETTINGS,
) -> tuple[str, ...]:
    """Return the variable names for *field_identifier* under *prefix*, most preferred first."""
    return names_for(prefix.child(field_identifier), settings=settings)


def names_for(
    path: Prefix, settings: OverlaySettings = _DEFAULT_SETTINGS
) -> tuple[str, ...]:
    """Return the canonical name for *path*, followed by its legacy spelling if usable."""
    canonical = canonical_name(path, settings=settings)
    legacy = _legacy_name(path, settings=settings)
    if legacy is None or legacy == canonical:
        return (canonical,)
    return (canonical, legacy)


def subtree_prefixes(
    path: Prefix, settings: OverlaySettings = _DEFAULT_SETTINGS
) -> tuple[str, ...]:
    """Return the name prefixes every variable below *path* must start with."""
    canonical = canonical_name(path, settings=settings)
    prefixes = [canonical + settings.delimiter if canonical else ""]
    legacy = _legacy_name(path, settings=settings)
    if legacy is not None and legacy != canonical:
        prefixes.append(legacy + settings.legacy_delimiter)
    return tuple(prefixes)


def canonical_name(
    path: Prefix, settings: OverlaySettings = _DEFAULT_SETTINGS
) -> str:
    return settings.delimiter.join(_upper_segments(path, settings=settings))


def _legacy_name(path: Prefix, settings: OverlaySettings) -> str | None:
    if not settings.accept_legacy_names:
        return None
    if settings.legacy_delimiter == settings.delimiter:
        return None
    # A segment that already contains the legacy delimiter makes the joined
    # name collide with a deeper nesting level, so it is never offered.
    for segment in path.segments:
        if settings.legacy_delimiter in str(segment):
            return None
    return settings.legacy_delimiter.join(_upper_segments(path, settings=settings))


def _upper_segments(path: Prefix, settings: OverlaySettings) -> list[str]:
    parts: list[str] = []
    root = path.root.rstrip(settings.delimiter + settings.legacy_delimiter)
    if root:
        parts.append(root.upper())
    parts.extend(str(segment).upper() for segment in path.segments)
    return parts
