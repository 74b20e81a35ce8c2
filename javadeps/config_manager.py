"""Configuration manager for javadeps using TOML files."""

from __future__ import annotations

import shlex
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

import toml

from . import config
from .errors import ConfigurationError

SECTION = "discovery"


@dataclass
class Settings:
    """Effective discovery settings (config file merged over defaults)."""
    src_root: str = config.DEFAULT_SRC_ROOT
    max_depth: int = config.DEFAULT_MAX_DEPTH
    base_package_segments: int = config.DEFAULT_BASE_PACKAGE_SEGMENTS
    collision_strategy: str = config.DEFAULT_COLLISION_STRATEGY
    source_extension: str = config.SOURCE_EXTENSION
    diff_command: List[str] = field(default_factory=lambda: shlex.split(config.DEFAULT_DIFF_COMMAND))

    def validate(self) -> "Settings":
        if self.max_depth < 1:
            raise ConfigurationError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.base_package_segments < 1:
            raise ConfigurationError(
                f"base_package_segments must be at least 1, got {self.base_package_segments}"
            )
        if self.collision_strategy not in config.COLLISION_STRATEGIES:
            raise ConfigurationError(
                f"collision_strategy must be one of: {', '.join(config.COLLISION_STRATEGIES)}"
            )
        if not self.source_extension.startswith("."):
            raise ConfigurationError(f"source_extension must start with '.', got '{self.source_extension}'")
        if not self.diff_command:
            raise ConfigurationError("diff_command must not be empty")
        return self


_INT_KEYS = {"max_depth", "base_package_segments"}
SETTING_KEYS = tuple(Settings.__dataclass_fields__)


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not config.CONFIG_FILE.exists():
        return {}
    try:
        with open(config.CONFIG_FILE, "r") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        raise ConfigurationError(f"Cannot read {config.CONFIG_FILE}: {exc}") from exc


def _save_full_config(data: Dict[str, Any]) -> None:
    """Write entire config dict to TOML file, preserving all sections."""
    config.ensure_base_dir()
    with open(config.CONFIG_FILE, "w") as f:
        toml.dump(data, f)


def _coerce(key: str, value: Any) -> Any:
    if key in _INT_KEYS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be an integer, got '{value}'")
    if key == "diff_command" and isinstance(value, str):
        return shlex.split(value)
    return value


def load_settings() -> Settings:
    """Load the ``[discovery]`` section merged over the built-in defaults.

    Unknown keys are ignored so newer config files keep working.
    """
    section = load_full_config().get(SECTION, {})
    values = {key: _coerce(key, section[key]) for key in SETTING_KEYS if key in section}
    return Settings(**values).validate()


def save_setting(key: str, value: str) -> Settings:
    """Persist a single discovery setting.

    Args:
        key: One of :data:`SETTING_KEYS`.
        value: Raw value from the command line; coerced to the key's type.

    Returns:
        The settings that are now in effect.
    """
    if key not in SETTING_KEYS:
        raise ConfigurationError(f"Unknown setting '{key}'. Known settings: {', '.join(SETTING_KEYS)}")

    data = load_full_config()
    section = data.setdefault(SECTION, {})
    section[key] = _coerce(key, value)
    settings = Settings(**{k: _coerce(k, v) for k, v in section.items() if k in SETTING_KEYS}).validate()
    _save_full_config(data)
    return settings


def reset_config() -> bool:
    """Drop the ``[discovery]`` section. Returns True if anything was removed."""
    data = load_full_config()
    if SECTION not in data:
        return False
    del data[SECTION]
    _save_full_config(data)
    return True


def settings_as_dict(settings: Settings) -> Dict[str, Any]:
    return asdict(settings)
