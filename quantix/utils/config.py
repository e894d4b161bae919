"""YAML and environment helpers shared by the config manager and the state store."""
from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict
import yaml
from dotenv import load_dotenv

# .env is read once so QUANTIX_* overrides are visible to every module
load_dotenv()

DEFAULT_CONFIG_PATH = "configs/default.yaml"


def read_yaml(path: str | Path) -> Dict[str, Any]:
    """Parse a YAML mapping from disk.

    Raises:
        FileNotFoundError: If the file is missing.
        ValueError: If the document is not a mapping.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {p}")
    return data


def env(key: str, default: Any | None = None) -> Any:
    return os.getenv(key, default)


def config_path() -> Path:
    """Path of the active config file ($QUANTIX_CONFIG or the bundled default)."""
    return Path(env("QUANTIX_CONFIG", DEFAULT_CONFIG_PATH))
