"""
Toolkit configuration.

A single ToolkitConfig dataclass holds the settings shared by the
cell view and the registry. Values come from, in order of precedence:
    1. ALIASKIT_* environment variables
    2. A YAML file passed to load_config()
    3. Dataclass defaults

Example YAML:
    word_bits: 32
    log_level: DEBUG
    log_file: aliaskit.log
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import yaml

from aliaskit.errors import ConfigError


SUPPORTED_WORD_BITS = (8, 16, 32, 64)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_WORD_BITS = "ALIASKIT_WORD_BITS"
ENV_LOG_LEVEL = "ALIASKIT_LOG_LEVEL"


@dataclass(frozen=True)
class ToolkitConfig:
    """
    Settings for aliaskit.

    Properties:
        word_bits: Width of a buffer element in bits (8, 16, 32 or 64)
        log_level: Level name used by setup_logging()
        log_file: Optional log file path used by setup_logging()
    """

    word_bits: int = 64
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.word_bits not in SUPPORTED_WORD_BITS:
            raise ConfigError(
                f"word_bits must be one of {SUPPORTED_WORD_BITS}, got {self.word_bits!r}"
            )
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log_level: {self.log_level!r}")

    @property
    def word_mask(self) -> int:
        return (1 << self.word_bits) - 1


def config_to_dict(config: ToolkitConfig) -> Dict[str, Any]:
    return asdict(config)


def config_from_dict(d: Optional[Dict[str, Any]]) -> ToolkitConfig:
    if d is None:
        return ToolkitConfig()
    if not isinstance(d, dict):
        raise ConfigError(f"Config must be a mapping, got {type(d).__name__}")
    unknown = set(d) - {"word_bits", "log_level", "log_file"}
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    try:
        word_bits = int(d.get("word_bits", 64))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid word_bits: {str(e)}")
    return ToolkitConfig(
        word_bits=word_bits,
        log_level=str(d.get("log_level", "WARNING")).upper(),
        log_file=d.get("log_file"),
    )


def _apply_env(d: Dict[str, Any], environ: Dict[str, str]) -> Dict[str, Any]:
    d = dict(d)
    if environ.get(ENV_WORD_BITS):
        d["word_bits"] = environ[ENV_WORD_BITS]
    if environ.get(ENV_LOG_LEVEL):
        d["log_level"] = environ[ENV_LOG_LEVEL]
    return d


def load_config(path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> ToolkitConfig:
    """
    Load configuration from an optional YAML file plus environment overrides.

    Args:
        path: YAML file path (optional)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ToolkitConfig

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
        FileNotFoundError: If path does not exist
    """
    data: Dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Config file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file '{path}': {str(e)}")
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigError(f"Config file '{path}' must contain a mapping")
            data = loaded
    data = _apply_env(data, dict(os.environ if environ is None else environ))
    return config_from_dict(data)


_default_config: Optional[ToolkitConfig] = None


def default_config() -> ToolkitConfig:
    """Return the process-wide config, loading it from the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = load_config()
    return _default_config


def set_default_config(config: Optional[ToolkitConfig]) -> None:
    """Replace the process-wide config (None resets to lazy loading)."""
    global _default_config
    _default_config = config
