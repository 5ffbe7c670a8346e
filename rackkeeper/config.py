"""Configuration loading: JSON file merged over built-in defaults."""

from __future__ import annotations
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
CONFIG_DIRNAME = "config"
CONFIG_ENV = "RACKKEEPER_CONFIG"
DATABASE_URL_ENV = "RACKKEEPER_DATABASE_URL"

DEFAULT_CONFIG: Dict[str, Any] = {
    "database": {"url": "sqlite:///rackkeeper.db"},
    "scorekeeper": {"history_limit": 10, "default_target": 5},
    "stats": {"report_cache_seconds": 24 * 60 * 60},
    "logging": {"level": "INFO"},
    "api": {"host": "127.0.0.1", "port": 8000},
}


def _find_config_path(start: Path) -> Optional[Path]:
    candidates = [start, *start.parents[:3]]
    for base in candidates:
        p = base / CONFIG_DIRNAME / CONFIG_FILENAME
        if p.exists():
            return p
    return None


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration merged over DEFAULT_CONFIG.

    Lookup order: explicit ``path``, then $RACKKEEPER_CONFIG, then
    ``config/config.json`` found by walking up from this package.  A missing
    file yields the defaults.  $RACKKEEPER_DATABASE_URL always wins for the
    database URL.
    """
    if path is None and os.environ.get(CONFIG_ENV):
        path = Path(os.environ[CONFIG_ENV])
    if path is None:
        path = _find_config_path(Path(__file__).resolve().parent)

    data: Dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Config not found at {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded config from %s", path)

    cfg = _merge(DEFAULT_CONFIG, data)
    if os.environ.get(DATABASE_URL_ENV):
        cfg["database"]["url"] = os.environ[DATABASE_URL_ENV]
    return cfg
