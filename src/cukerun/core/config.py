from __future__ import annotations

import os
from pathlib import Path
import tomllib

_CONFIG_CACHE: dict | None = None

_TRUTHY = {"1", "true", "yes", "on"}


def config_path() -> Path:
    override = os.environ.get("CUKERUN_CONFIG_PATH")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else (Path.home() / ".config")
    return root / "cukerun" / "config.toml"


def load_config() -> dict:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Invalid config file: {path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file structure: {path}")
    return data


def get_config() -> dict:
    global _CONFIG_CACHE
    if _CONFIG_CACHE is None:
        _CONFIG_CACHE = load_config()
    return _CONFIG_CACHE


def reset_config_cache() -> None:
    global _CONFIG_CACHE
    _CONFIG_CACHE = None


def get_config_value(*keys: str, default: object | None = None) -> object | None:
    current: object = get_config()
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def extra_fields_enabled() -> bool:
    """Whether step actions also receive the step stash as a second argument."""
    env_value = os.environ.get("CUKERUN_EXTRA_FIELDS")
    if env_value is not None:
        return env_value.strip().lower() in _TRUTHY
    value = get_config_value("executor", "extra_fields", default=False)
    if not isinstance(value, bool):
        raise ValueError(f"executor.extra_fields must be a boolean, got {value!r}")
    return value


def log_level() -> str:
    value = os.environ.get("CUKERUN_LOG_LEVEL") or get_config_value("logging", "level", default="WARNING")
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"logging.level must be a level name, got {value!r}")
    return value.strip().upper()
