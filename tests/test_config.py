"""
Tests for configuration loading and logging setup.
"""

import logging

import pytest

from aliaskit.cells import Buffer
from aliaskit.config import (
    ToolkitConfig,
    config_from_dict,
    config_to_dict,
    default_config,
    load_config,
    set_default_config,
)
from aliaskit.errors import ConfigError
from aliaskit.log import get_logger


@pytest.fixture
def restore_default_config():
    yield
    set_default_config(None)


class TestToolkitConfig:
    """Test the config dataclass."""

    def test_defaults(self):
        config = ToolkitConfig()
        assert config.word_bits == 64
        assert config.log_level == "WARNING"
        assert config.log_file is None
        assert config.word_mask == (1 << 64) - 1

    def test_invalid_word_bits(self):
        with pytest.raises(ConfigError):
            ToolkitConfig(word_bits=12)

    def test_invalid_log_level(self):
        with pytest.raises(ConfigError):
            ToolkitConfig(log_level="LOUD")

    def test_dict_roundtrip(self):
        config = ToolkitConfig(word_bits=16, log_level="DEBUG")
        assert config_from_dict(config_to_dict(config)) == config

    def test_unknown_keys(self):
        with pytest.raises(ConfigError):
            config_from_dict({"word_size": 64})


class TestLoadConfig:
    """Test YAML and environment loading."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "aliaskit.yaml"
        path.write_text("word_bits: 32\nlog_level: debug\n")
        config = load_config(str(path), environ={})
        assert config.word_bits == 32
        assert config.log_level == "DEBUG"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path), environ={}) == ToolkitConfig()

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "aliaskit.yaml"
        path.write_text("word_bits: 32\n")
        config = load_config(str(path), environ={"ALIASKIT_WORD_BITS": "8"})
        assert config.word_bits == 8

    def test_bad_environment_value(self):
        with pytest.raises(ConfigError):
            load_config(environ={"ALIASKIT_WORD_BITS": "wide"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"), environ={})

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("word_bits: [32\n")
        with pytest.raises(ConfigError):
            load_config(str(path), environ={})

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(str(path), environ={})


class TestDefaultConfig:
    """Test the process-wide config."""

    def test_default_word_bits_used_by_buffer(self, restore_default_config):
        set_default_config(ToolkitConfig(word_bits=16))
        assert default_config().word_bits == 16
        buf = Buffer([1])
        assert buf.word_bits == 16
        with pytest.raises(ValueError):
            Buffer([1 << 16])


class TestLogging:
    """Test logging helpers."""

    def test_get_logger_is_std_logger(self):
        logger = get_logger("aliaskit.registry")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "aliaskit.registry"

    def test_drain_failure_logs_warning(self, caplog):
        from aliaskit.consumables import CallableItem
        from aliaskit.registry import DispatchRegistry

        def bad():
            raise RuntimeError("boom")

        registry = DispatchRegistry()
        registry.push(CallableItem(bad))
        with caplog.at_level(logging.WARNING, logger="aliaskit.registry"):
            registry.drain_report()
        assert "Drain halted at item 0" in caplog.text

