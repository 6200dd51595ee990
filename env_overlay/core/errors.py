"""Base exception class for all env-overlay-specific errors."""


class EnvOverlayError(Exception):
    """Base class for all env-overlay errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
