"""Application configuration management."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from alarmed.models import AppConfig

log = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".config" / "alarmed"
_DB_DIR = Path.home() / ".local" / "share" / "alarmed"

_CONFIG_FILE = _CONFIG_DIR / "config.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def load_config() -> AppConfig:
    """Load config from disk, returning defaults if none exists."""
    if _CONFIG_FILE.exists():
        try:
            data = json.loads(_CONFIG_FILE.read_text())
            return AppConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            log.warning("Ignoring unreadable config %s: %s", _CONFIG_FILE, exc)
    return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write config to disk. Returns the config file path."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2))
    return _CONFIG_FILE


def get_db_path() -> Path:
    """Resolve the database path from config (or default)."""
    config = load_config()
    if config.db_path is not None:
        p = Path(config.db_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    _DB_DIR.mkdir(parents=True, exist_ok=True)
    return _DB_DIR / "alarmed.db"


def set_db_path(path: str) -> AppConfig:
    """Set a custom database path and save config."""
    resolved = Path(path).expanduser().resolve()
    if resolved.is_dir():
        resolved = resolved / "alarmed.db"
    resolved.parent.mkdir(parents=True, exist_ok=True)
    config = load_config()
    config.db_path = str(resolved)
    save_config(config)
    return config


def reset_db_path() -> AppConfig:
    """Reset to the default local database path."""
    config = load_config()
    config.db_path = None
    save_config(config)
    return config


def set_log_level(level: str) -> AppConfig:
    """Persist the logging level used by the CLI."""
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; use one of {', '.join(_LOG_LEVELS)}")
    config = load_config()
    config.log_level = level
    save_config(config)
    return config
