"""Tests verifying the EnvOverlayError type hierarchy."""

from pathlib import Path

from pydantic import ValidationError, TypeAdapter
import pytest

from env_overlay.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    ModelImportError,
)
from env_overlay.core.errors import EnvOverlayError
from env_overlay.overlay.infrastructure.errors import (
    MissingCapabilityError,
    NonUnicodeValueError,
    ParseError,
)


def _validation_error() -> ValidationError:
    with pytest.raises(ValidationError) as exc_info:
        TypeAdapter(int).validate_python("abc")
    return exc_info.value


class TestEnvOverlayErrorHierarchy:
    """All env-overlay-specific exceptions inherit from EnvOverlayError."""

    def test_parse_error(self) -> None:
        error = ParseError(name="APP__PORT", raw_value="x", cause=ValueError("bad"))
        assert isinstance(error, EnvOverlayError)

    def test_non_unicode_value_error(self) -> None:
        assert isinstance(NonUnicodeValueError(name="APP__NAME"), EnvOverlayError)

    def test_missing_capability_error(self) -> None:
        error = MissingCapabilityError(path="server", reason="no fields")
        assert isinstance(error, EnvOverlayError)

    def test_config_errors(self) -> None:
        assert isinstance(ConfigLoadError(path=Path("/x.yaml")), EnvOverlayError)
        assert isinstance(ConfigValidationError(reason="bad"), EnvOverlayError)
        assert isinstance(ModelImportError(target="a:B", reason="bad"), EnvOverlayError)

    def test_env_overlay_error_is_exception(self) -> None:
        assert isinstance(EnvOverlayError("test"), Exception)


class TestErrorMessages:
    """Messages start with 'Failed to ' and carry the relevant detail."""

    def test_parse_error_message(self) -> None:
        error = ParseError(name="APP__PORT", raw_value="x", cause=ValueError("bad"))
        assert str(error) == "Failed to parse environment variable 'APP__PORT': invalid value 'x' (bad)"

    def test_parse_error_summarises_validation_error(self) -> None:
        error = ParseError(name="APP__PORT", raw_value="abc", cause=_validation_error())
        message = str(error)
        assert message.startswith("Failed to ")
        assert "valid integer" in message
        assert "\n" not in message

    def test_missing_capability_message(self) -> None:
        error = MissingCapabilityError(path="server", reason="no fields")
        assert str(error) == "Failed to overlay 'server': no fields"
