"""Error types raised while overlaying environment variables."""

from pydantic import ValidationError

from env_overlay.core.errors import EnvOverlayError


class ParseError(EnvOverlayError):
    """Raised when a present variable's value does not convert to the field's type."""

    def __init__(self, name: str, raw_value: str, cause: Exception) -> None:
        self.name = name
        self.raw_value = raw_value
        self.cause = cause
        super().__init__(
            f"Failed to parse environment variable '{name}': "
            f"invalid value {raw_value!r} ({_summarise(cause)})"
        )


class NonUnicodeValueError(EnvOverlayError):
    """Raised when a variable's value holds bytes that are not valid unicode."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Failed to read environment variable '{name}': value is not valid unicode"
        )


class MissingCapabilityError(EnvOverlayError):
    """Raised when a nested or extendable field cannot be described or grown."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to overlay '{path}': {reason}")


def _summarise(cause: Exception) -> str:
    if isinstance(cause, ValidationError):
        return "; ".join(error["msg"] for error in cause.errors())
    return str(cause) or type(cause).__name__
