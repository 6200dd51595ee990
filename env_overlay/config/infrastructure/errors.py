"""Error types raised by config infrastructure."""

from pathlib import Path

from env_overlay.core.errors import EnvOverlayError


class ConfigLoadError(EnvOverlayError):
    """Raised when the base config file cannot be opened or parsed."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load config: {reason}: {path}")


class ConfigValidationError(EnvOverlayError):
    """Raised when the base config does not match the target model."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate config: {reason}")


class ModelImportError(EnvOverlayError):
    """Raised when a ``module:Class`` target cannot be imported."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        super().__init__(f"Failed to import config model '{target}': {reason}")
