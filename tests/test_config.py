"""
Test 6: Config System (config.py)

Tests FactoryConfig, ConfigLoader layering and Factory.from_config.
"""

import os
import json
import logging
import pytest

from fabrica import Factory, ConsoleDiagnosticListener
from fabrica.config import ConfigLoader, ConfigError, FactoryConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from FABRICA_* variables and a stray fabrica.yaml."""
    for key in list(os.environ):
        if key.startswith("FABRICA_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


# ============================================================================
# FactoryConfig
# ============================================================================

class TestFactoryConfig:

    def test_defaults(self):
        config = FactoryConfig()
        assert config.max_depth == 64
        assert config.diagnostics is False
        assert config.log_level == "DEBUG"
        assert config.level == logging.DEBUG

    def test_level_normalised(self):
        assert FactoryConfig(log_level="info").log_level == "INFO"

    @pytest.mark.parametrize("value", [0, -3, "10", 2.5, True])
    def test_invalid_max_depth(self, value):
        with pytest.raises(ConfigError):
            FactoryConfig(max_depth=value)

    def test_invalid_diagnostics(self):
        with pytest.raises(ConfigError):
            FactoryConfig(diagnostics="yes")

    def test_unknown_level(self):
        with pytest.raises(ConfigError, match="unknown level"):
            FactoryConfig(log_level="LOUD")

    def test_to_dict(self):
        assert FactoryConfig(max_depth=8).to_dict() == {
            "max_depth": 8,
            "diagnostics": False,
            "log_level": "DEBUG",
        }


# ============================================================================
# ConfigLoader
# ============================================================================

class TestConfigLoader:

    def test_empty(self):
        loader = ConfigLoader.load()
        assert loader.to_dict() == {}
        assert loader.factory_config() == FactoryConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("factory:\n  max_depth: 12\n  diagnostics: true\n")
        loader = ConfigLoader.load([str(path)])
        assert loader.get("factory.max_depth") == 12
        assert loader.factory_config().diagnostics is True

    def test_default_yaml_discovered(self, tmp_path):
        (tmp_path / "fabrica.yaml").write_text("factory:\n  max_depth: 9\n")
        assert ConfigLoader.load().get("factory.max_depth") == 9

    def test_json_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"factory": {"log_level": "warning"}}))
        loader = ConfigLoader.load([str(path)])
        assert loader.factory_config().log_level == "WARNING"

    def test_glob_pattern_merges_in_order(self, tmp_path):
        (tmp_path / "a.yaml").write_text("factory:\n  max_depth: 5\n  diagnostics: true\n")
        (tmp_path / "b.yaml").write_text("factory:\n  max_depth: 7\n")
        loader = ConfigLoader.load([str(tmp_path / "*.yaml")])
        assert loader.get("factory") == {"max_depth": 7, "diagnostics": True}

    def test_unsupported_file_type(self, tmp_path):
        path = tmp_path / "settings.ini"
        path.write_text("[factory]\n")
        with pytest.raises(ConfigError):
            ConfigLoader.load([str(path)])

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("FABRICA_FACTORY__MAX_DEPTH=20\nOTHER=ignored\n")
        loader = ConfigLoader.load(env_file=str(env_file))
        assert loader.get("factory.max_depth") == 20
        assert loader.get("other") is None

    def test_missing_env_file_ignored(self, tmp_path):
        loader = ConfigLoader.load(env_file=str(tmp_path / "missing.env"))
        assert loader.to_dict() == {}

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("factory:\n  max_depth: 12\n")
        monkeypatch.setenv("FABRICA_FACTORY__MAX_DEPTH", "30")
        monkeypatch.setenv("FABRICA_FACTORY__DIAGNOSTICS", "true")
        loader = ConfigLoader.load([str(path)])
        assert loader.get("factory.max_depth") == 30
        assert loader.get("factory.diagnostics") is True

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("FABRICA_FACTORY__MAX_DEPTH", "30")
        loader = ConfigLoader.load(overrides={"factory": {"max_depth": 3}})
        assert loader.factory_config().max_depth == 3

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_FACTORY__MAX_DEPTH", "4")
        loader = ConfigLoader.load(env_prefix="APP_")
        assert loader.get("factory.max_depth") == 4

    def test_get_default(self):
        assert ConfigLoader.load().get("factory.nothing", "fallback") == "fallback"

    def test_parse_value(self):
        loader = ConfigLoader()
        assert loader._parse_value("true") is True
        assert loader._parse_value("no") is False
        assert loader._parse_value("1") == 1
        assert loader._parse_value("1.5") == 1.5
        assert loader._parse_value('{"a": 1}') == {"a": 1}
        assert loader._parse_value("plain") == "plain"

    def test_unknown_factory_key(self):
        loader = ConfigLoader.load(overrides={"factory": {"max_dept": 3}})
        with pytest.raises(ConfigError, match="max_dept"):
            loader.factory_config()

    def test_factory_section_must_be_mapping(self):
        loader = ConfigLoader.load(overrides={"factory": 3})
        with pytest.raises(ConfigError):
            loader.factory_config()


# ============================================================================
# Factory.from_config
# ============================================================================

class TestFactoryFromConfig:

    def test_from_factory_config(self):
        factory = Factory.from_config(FactoryConfig(max_depth=5))
        assert factory.max_depth == 5
        assert factory.diagnostics.enabled is False

    def test_from_loader_with_diagnostics(self):
        loader = ConfigLoader.load(
            overrides={"factory": {"diagnostics": True, "log_level": "INFO"}}
        )
        factory = Factory.from_config(loader)
        assert factory.diagnostics.enabled is True
        listener = factory.diagnostics._listeners[0]
        assert isinstance(listener, ConsoleDiagnosticListener)
        assert listener.log_level == logging.INFO

    def test_from_invalid_object(self):
        with pytest.raises(TypeError):
            Factory.from_config({"max_depth": 5})
