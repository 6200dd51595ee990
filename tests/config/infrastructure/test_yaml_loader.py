"""Tests for loading base configs from YAML."""

from pathlib import Path

import pytest

from env_overlay.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
)
from env_overlay.config.infrastructure.yaml_loader import YamlConfigLoader
from tests.config.fake_observer import FakeConfigObserver
from tests.overlay.models import AppConfig, ServiceSettings

# __file__ is tests/config/infrastructure/test_yaml_loader.py
FIXTURES = Path(__file__).parent.parent.parent / "fixtures"


def _fixture(name: str) -> Path:
    return FIXTURES / name


class TestValidConfigLoading:
    """A valid YAML file loads into the requested model."""

    def test_loads_scalars_and_nested_values(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        cfg = loader.load(model_type=AppConfig, path=_fixture("base_config.yaml"))

        assert cfg.name == "from-yaml"
        assert cfg.debug is True
        assert cfg.server.port == 9000
        assert cfg.server.host == "example.internal"

    def test_loads_collections(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        cfg = loader.load(model_type=AppConfig, path=_fixture("base_config.yaml"))

        assert cfg.vector == [1, 2]
        assert [s.value for s in cfg.nested_vector] == [10]

    def test_missing_keys_use_model_defaults(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        cfg = loader.load(model_type=AppConfig, path=_fixture("base_config.yaml"))

        assert cfg.ratio == 0.5
        assert cfg.sub_optional is None

    def test_empty_file_uses_defaults(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        cfg = loader.load(model_type=AppConfig, path=_fixture("empty.yaml"))
        assert cfg == AppConfig()

    def test_no_path_uses_defaults(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        cfg = loader.load(model_type=AppConfig)
        assert cfg == AppConfig()

    def test_loads_dataclass(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        cfg = loader.load(model_type=ServiceSettings)
        assert cfg == ServiceSettings()

    def test_emits_config_loaded_event(self) -> None:
        observer = FakeConfigObserver()
        path = _fixture("base_config.yaml")

        YamlConfigLoader(observer=observer).load(model_type=AppConfig, path=path)

        assert observer.loaded == [{"model": "AppConfig", "source": str(path)}]

    def test_defaults_source_is_reported(self) -> None:
        observer = FakeConfigObserver()
        YamlConfigLoader(observer=observer).load(model_type=AppConfig)
        assert observer.loaded[0]["source"] == "defaults"


class TestInvalidConfigLoading:
    """Unreadable or mismatched files raise config errors."""

    def test_missing_file(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        with pytest.raises(ConfigLoadError) as exc_info:
            loader.load(model_type=AppConfig, path=_fixture("does_not_exist.yaml"))

        assert str(exc_info.value).startswith("Failed to ")

    def test_invalid_yaml(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        with pytest.raises(ConfigLoadError):
            loader.load(model_type=AppConfig, path=_fixture("invalid_yaml.yaml"))

    def test_non_mapping_root(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        with pytest.raises(ConfigValidationError):
            loader.load(model_type=AppConfig, path=_fixture("list_root.yaml"))

    def test_type_mismatch(self) -> None:
        loader = YamlConfigLoader(observer=FakeConfigObserver())
        with pytest.raises(ConfigValidationError) as exc_info:
            loader.load(model_type=AppConfig, path=_fixture("bad_types.yaml"))

        assert "port" in str(exc_info.value)

    def test_failed_load_emits_no_event(self) -> None:
        observer = FakeConfigObserver()
        with pytest.raises(ConfigLoadError):
            YamlConfigLoader(observer=observer).load(
                model_type=AppConfig, path=_fixture("does_not_exist.yaml")
            )
        assert observer.loaded == []
