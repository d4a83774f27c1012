#config/config.py
import logging
import os
from pathlib import Path
from typing import Any, Union

import tomlkit

from macdevice.core.exceptions import ConfigError

_log = logging.getLogger(__name__)

# defaults.toml path
DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.toml"
USER_CONFIG_PATH = Path.home() / ".config" / "macdevice" / "config.toml"

CONFIG_ENV_VAR = "MACDEVICE_CONFIG"
MODEL_ENV_VAR = "MACDEVICE_MODEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_toml(path: Path) -> dict:
    """Safely load a TOML file, returning an empty dictionary if the file is missing or invalid."""
    if not path.exists():
        _log.debug("Config file not found: %s", path)
        return {}
    try:
        data = tomlkit.loads(path.read_text(encoding="utf-8")).unwrap()
        _log.debug("Loaded config from %s", path)
        return data
    except Exception:
        _log.exception("Failed to parse TOML: %s", path)
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge the override dictionary into the base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def validate_config(config: dict) -> None:
    """
    Check the types of the keys macdevice reads.

    Raises:
        ConfigError: if a section or value has the wrong shape.
    """
    for section in ("main", "mappings", "resolver", "log"):
        if not isinstance(config.get(section, {}), dict):
            raise ConfigError(f"[{section}] must be a table")

    if not isinstance(config.get("main", {}).get("model", ""), str):
        raise ConfigError("main.model must be a string")
    if not isinstance(config.get("mappings", {}).get("path", ""), str):
        raise ConfigError("mappings.path must be a string")

    timeout = config.get("resolver", {}).get("timeout", 5)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("resolver.timeout must be a positive number")

    level = config.get("log", {}).get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        raise ConfigError(f"log.level must be one of {', '.join(_LOG_LEVELS)}")
    if not isinstance(config.get("log", {}).get("file", ""), str):
        raise ConfigError("log.file must be a string")


def load_config(system_path: Union[Path, str, None] = None) -> dict:
    """
    Load defaults.toml and merge it with the optional user config.

    Args:
        system_path (Path, optional): Path to a user configuration file. If None,
                                       MACDEVICE_CONFIG or the default user path is used.

    Returns:
        dict: The merged configuration. Invalid user settings are dropped in
              favour of the defaults.
    """
    defaults = _load_toml(DEFAULTS_PATH)
    cfg = _load_toml(DEFAULTS_PATH)

    if system_path:
        user_path = Path(system_path)
    elif os.environ.get(CONFIG_ENV_VAR):
        user_path = Path(os.environ[CONFIG_ENV_VAR])
    else:
        user_path = USER_CONFIG_PATH

    user_cfg = _load_toml(user_path)
    if user_cfg:
        cfg = _deep_merge(cfg, user_cfg)

    try:
        validate_config(cfg)
    except ConfigError as e:
        _log.warning("Invalid configuration in %s (%s); using defaults", user_path, e)
        cfg = defaults

    env_model = os.environ.get(MODEL_ENV_VAR, "").strip()
    if env_model:
        cfg.setdefault("main", {})["model"] = env_model

    return cfg


def get(config: dict, dotted_key: str, default: Any = None) -> Any:
    """Look up "section.key" in a loaded configuration."""
    node: Any = config
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node
