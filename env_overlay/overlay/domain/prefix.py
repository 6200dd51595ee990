"""Prefix value object — the accumulated path of a field in the config tree."""

from pydantic import BaseModel

type Segment = str | int


class Prefix(BaseModel, frozen=True):
    """Immutable ordered path: root prefix, then field identifiers and indices.

    Appending never mutates; each recursive call gets its own child prefix, so
    nothing a child appends is visible to its siblings.
    """

    root: str = ""
    segments: tuple[Segment, ...] = ()

    def child(self, segment: Segment) -> "Prefix":
        return Prefix(root=self.root, segments=(*self.segments, segment))

    def dotted(self) -> str:
        """Human-readable attribute path, e.g. ``servers[0].port``."""
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif parts:
                parts.append(f".{segment}")
            else:
                parts.append(segment)
        return "".join(parts) or "<root>"
