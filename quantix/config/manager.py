"""Wallet configuration: YAML file, environment overrides and pydantic validation.

Resolution order for the global config (later wins):
1. schema defaults (quantix.config.schemas)
2. the YAML file at $QUANTIX_CONFIG (default configs/default.yaml), if present
3. QUANTIX__<SECTION>__<KEY> environment variables, e.g.
   QUANTIX__PAPER_TRADING__FEE_RATE=0.002 (a .env file is honoured)
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import yaml
from pydantic import ValidationError

from .schemas import Config
from ..utils.config import read_yaml, config_path
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

ENV_PREFIX = "QUANTIX__"


def deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively overlay override onto a copy of base."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def env_overrides(environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """Nested override dict from PREFIX<SECTION>__<KEY>=value variables.

    Values are parsed as YAML scalars so "false", "0.002" and "7" arrive typed.
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(prefix):
            continue
        path = [p.lower() for p in name[len(prefix):].split("__") if p]
        if not path:
            continue
        node = overrides
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = yaml.safe_load(raw)
    return overrides


class ConfigManager:
    """Validated wallet configuration with dot-notation access.

    Usage:
        config = ConfigManager.from_yaml("configs/default.yaml")

        fee_rate = config.get("paper_trading.fee_rate")
        config.set("paper_trading.slippage_enabled", False)
        paper = config.get_section("paper_trading")
    """

    def __init__(self, config: Optional[Config] = None):
        self._config = config or Config()
        self._config_path: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> ConfigManager:
        """Load and validate a YAML file.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config doesn't match schema
        """
        config_file = Path(path)
        try:
            config = Config(**read_yaml(config_file))
        except ValidationError as e:
            LOGGER.error(f"Configuration validation failed for {config_file}: {e}")
            raise
        LOGGER.info(f"Configuration loaded from {config_file}")

        manager = cls(config)
        manager._config_path = config_file
        return manager

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> ConfigManager:
        return cls(Config(**config_dict))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dotted path, descending into models and dicts.

        Example:
            >>> config.get("paper_trading.daily_bonus.pro")
            100.0
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                if k not in value:
                    return default
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default
        return value

    def get_section(self, section: str) -> Optional[Any]:
        """Return a whole section model, e.g. the PaperTradingConfig."""
        return getattr(self._config, section, None)

    def set(self, key: str, value: Any) -> None:
        """Set one value by dotted path and re-validate.

        An invalid value leaves the current configuration untouched.

        Raises:
            ValueError: If key path is invalid
            ValidationError: If value doesn't match schema
        """
        *parents, leaf = key.split(".")
        data = self.to_dict()
        node = data
        for k in parents:
            if not isinstance(node.get(k), dict):
                raise ValueError(f"Invalid configuration path: {key}")
            node = node[k]
        if leaf not in node:
            raise ValueError(f"Invalid configuration path: {key}")
        node[leaf] = value

        self._config = Config(**data)
        LOGGER.debug(f"Configuration updated: {key} = {value}")

    def merge(self, other: Mapping[str, Any] | ConfigManager) -> None:
        """Overlay a partial config (dict or another manager) and re-validate."""
        other_dict = other.to_dict() if isinstance(other, ConfigManager) else other
        self._config = Config(**deep_merge(self.to_dict(), other_dict))
        LOGGER.info("Configuration merged")

    def to_dict(self) -> Dict[str, Any]:
        return self._config.model_dump()

    def to_yaml(self, path: str | Path) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        LOGGER.info(f"Configuration saved to {output_path}")

    def reload(self) -> None:
        """Re-read the YAML file this manager was loaded from.

        Raises:
            RuntimeError: If the manager was not loaded from a file
        """
        if self._config_path is None:
            raise RuntimeError("Cannot reload: no configuration file path set")
        self._config = Config(**read_yaml(self._config_path))
        LOGGER.info(f"Configuration reloaded from {self._config_path}")

    @property
    def config(self) -> Config:
        return self._config


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Process-wide configuration, built on first use (see module docstring)."""
    global _global_config
    if _global_config is None:
        path = config_path()
        if path.exists():
            manager = ConfigManager.from_yaml(path)
        else:
            manager = ConfigManager()
            LOGGER.info(f"No config at {path}; using defaults")
        overrides = env_overrides()
        if overrides:
            manager.merge(overrides)
        _global_config = manager
    return _global_config


def set_global_config(config: ConfigManager) -> None:
    global _global_config
    _global_config = config
    LOGGER.info("Global configuration updated")


def reset_global_config() -> None:
    global _global_config
    _global_config = None
