"""Structlog implementation of the OverlayObserver port."""

import structlog


class StructlogOverlayObserver:
    """Delegates overlay domain events to structlog.

    Satisfies the OverlayObserver protocol structurally. Raw variable values
    are never logged since they frequently hold secrets.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def overlay_started(self, prefix: str) -> None:
        self._log.debug("overlay.started", prefix=prefix)

    def overlay_variable_applied(self, name: str, path: str) -> None:
        self._log.info("overlay.variable_applied", name=name, path=path)

    def overlay_collection_grown(self, path: str, length: int) -> None:
        self._log.debug("overlay.collection_grown", path=path, length=length)

    def overlay_completed(self, prefix: str, applied: int) -> None:
        self._log.info("overlay.completed", prefix=prefix, applied=applied)

    def overlay_failed(self, prefix: str, reason: str) -> None:
        self._log.error("overlay.failed", prefix=prefix, reason=reason)
