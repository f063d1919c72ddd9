"""Logic for loading and merging configuration files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from sveltedoc.deep_merge import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "options": {
        "include_source_locations": False,
        "dialect_version": 3,
        "ignore_private": False,
    },
    "output": {
        "indent": 2,
    },
    "ignore_keywords": [],
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            if not isinstance(user_config, dict):
                msg = f"Configuration file {p} must contain a mapping"
                raise SystemExit(msg)
            config = deep_merge(config, user_config)
        else:
            logger.warning("Configuration file %s not found, using defaults", p)
    return config
