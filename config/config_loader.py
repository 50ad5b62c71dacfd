"""YAML configuration for the navmesh engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional

import yaml

DEFAULT_CONFIG_FILE = os.path.join(os.path.dirname(__file__), "settings.yaml")

LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigLoader:
    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config: dict = {}
        if os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                self.config = yaml.safe_load(f) or {}

    def get(self, *keys: str, default: Any = None) -> Any:
        """
        Return a value from the configuration.
        When a key along the path does not exist:
          - raise KeyError if no default is provided
          - return the default otherwise
        """
        ref = self.config
        for key in keys:
            if isinstance(ref, dict) and key in ref:
                ref = ref[key]
            else:
                if default is not None:
                    return default
                raise KeyError(f"Configuration key {' -> '.join(keys)} not found and no default provided.")
        return ref


@dataclass(slots=True)
class NavMeshSettings:
    """Tunables for building and querying a navmesh."""

    actor_size: int = 1
    max_cache_size: int = 1000
    use_heuristic: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if int(self.actor_size) < 1:
            raise ValueError("actor_size must be at least 1")
        if int(self.max_cache_size) < 0:
            raise ValueError("max_cache_size must not be negative")
        if not isinstance(self.use_heuristic, bool):
            raise ValueError(f"use_heuristic must be true or false, got {self.use_heuristic!r}")
        level = str(self.log_level).upper()
        if level not in LOG_LEVEL_NAMES:
            raise ValueError(f"unknown log level '{self.log_level}'")
        self.actor_size = int(self.actor_size)
        self.max_cache_size = int(self.max_cache_size)
        self.log_level = level


def load_navmesh_settings(config_file: Optional[str] = None) -> NavMeshSettings:
    """Read the ``navmesh`` section, falling back to defaults for missing keys."""
    loader = ConfigLoader(config_file or DEFAULT_CONFIG_FILE)
    defaults = NavMeshSettings()
    return NavMeshSettings(
        actor_size=loader.get("navmesh", "actor_size", default=defaults.actor_size),
        max_cache_size=loader.get("navmesh", "max_cache_size", default=defaults.max_cache_size),
        use_heuristic=loader.get("navmesh", "use_heuristic", default=defaults.use_heuristic),
        log_level=loader.get("navmesh", "log_level", default=defaults.log_level),
    )
