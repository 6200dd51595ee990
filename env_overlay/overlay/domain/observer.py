"""Observer port for the overlay domain — defines events in domain language."""

from typing import Protocol


class OverlayObserver(Protocol):
    def overlay_started(self, prefix: str) -> None: ...

    def overlay_variable_applied(self, name: str, path: str) -> None: ...

    def overlay_collection_grown(self, path: str, length: int) -> None: ...

    def overlay_completed(self, prefix: str, applied: int) -> None: ...

    def overlay_failed(self, prefix: str, reason: str) -> None: ...
