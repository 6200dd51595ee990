"""YAML base-config loader — builds the value that environment variables are overlaid onto."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from env_overlay.config.domain.observer import ConfigObserver
from env_overlay.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
)


class YamlConfigLoader:
    """Loads a pydantic model or dataclass from a YAML file, or from its defaults."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load[T](self, model_type: type[T], path: Path | None = None) -> T:
        """
        Parse *path* (if given) and validate it into *model_type*.

        Without a path the model is built from its field defaults.

        Raises:
            ConfigLoadError: if the file does not exist or is not valid YAML.
            ConfigValidationError: if the data does not match *model_type*.
        """
        raw = _parse_yaml(path=path) if path is not None else {}
        cfg = _build_config(model_type=model_type, raw=raw)
        self._observer.config_loaded(
            model=model_type.__name__,
            source=str(path) if path is not None else "defaults",
        )
        return cfg


def _parse_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason="invalid YAML") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"top-level YAML value must be a mapping, found {type(data).__name__}"
        )
    return data


def _build_config[T](model_type: type[T], raw: dict[str, Any]) -> T:
    try:
        return TypeAdapter(model_type).validate_python(raw)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
