"""Settings manager for buildgraph settings.yaml files.

Manages three-scope settings system:
- User global (~/.buildgraph/settings.yaml)
- Project (.buildgraph/settings.yaml)
- Local (.buildgraph/settings.local.yaml)

Settings format:
```yaml
resolution:
  strategy: namespaced   # flat (default) or namespaced
  suggestions:
    limit: 3             # 0 disables "did you mean" suggestions
    cutoff: 0.6
logging:
  level: DEBUG
  path: ./buildgraph.log.jsonl
```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

from .name_resolution import NamespacedNameResolver
from .name_resolution import NameResolver
from .name_resolution import SimpleNameResolver
from .name_resolution.suggestions import DEFAULT_CUTOFF
from .name_resolution.suggestions import DEFAULT_LIMIT

logger = logging.getLogger(__name__)

ScopeType = Literal["user", "project", "local"]

STRATEGIES: dict[str, type[NameResolver]] = {
    "flat": SimpleNameResolver,
    "namespaced": NamespacedNameResolver,
}


def _section(settings: dict[str, Any], key: str) -> dict[str, Any]:
    """Return ``settings[key]`` if it is a mapping, else an empty one."""
    value = settings.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning(f"Ignoring '{key}' settings: expected a mapping, got {value!r}")
        return {}
    return value


@dataclass
class ResolutionSettings:
    """Name resolution settings.

    Attributes:
        strategy: Resolver to use ("flat" or "namespaced")
        suggestion_limit: Maximum spelling suggestions per missing dependency
        suggestion_cutoff: Similarity threshold for suggestions (0..1)
    """

    strategy: str = "flat"
    suggestion_limit: int = DEFAULT_LIMIT
    suggestion_cutoff: float = DEFAULT_CUTOFF

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> ResolutionSettings:
        """Load resolution settings from a merged settings dictionary.

        Invalid values are logged and replaced by their defaults.
        """
        resolution = _section(settings, "resolution")
        suggestions = _section(resolution, "suggestions")
        defaults = cls()

        strategy = resolution.get("strategy", defaults.strategy)
        if strategy not in STRATEGIES:
            logger.warning(f"Unknown resolution strategy '{strategy}', using '{defaults.strategy}'")
            strategy = defaults.strategy

        limit = suggestions.get("limit", defaults.suggestion_limit)
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            logger.warning(f"Invalid suggestion limit {limit!r}, using {defaults.suggestion_limit}")
            limit = defaults.suggestion_limit

        cutoff = suggestions.get("cutoff", defaults.suggestion_cutoff)
        if not isinstance(cutoff, int | float) or isinstance(cutoff, bool) or not 0 <= cutoff <= 1:
            logger.warning(f"Invalid suggestion cutoff {cutoff!r}, using {defaults.suggestion_cutoff}")
            cutoff = defaults.suggestion_cutoff

        return cls(strategy=strategy, suggestion_limit=limit, suggestion_cutoff=float(cutoff))


def create_resolver(settings: ResolutionSettings) -> NameResolver:
    """Instantiate the resolver selected by ``settings.strategy``."""
    resolver = STRATEGIES[settings.strategy]()
    logger.debug(f"Using {resolver!r} (strategy={settings.strategy})")
    return resolver


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, config_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            config_dir: Directory holding project/local settings (for testing).
                        If None, uses .buildgraph in current directory.
            user_dir: Directory holding user settings. If None, uses ~/.buildgraph.
        """
        if config_dir is None:
            config_dir = Path(".buildgraph")
        if user_dir is None:
            user_dir = Path.home() / ".buildgraph"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = config_dir / "settings.yaml"
        self.local_settings_file = config_dir / "settings.local.yaml"

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings
        """
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._deep_merge(merged, settings)
        return merged

    def get_resolution_settings(self) -> ResolutionSettings:
        return ResolutionSettings.from_settings(self.get_merged_settings())

    def get_logging_settings(self) -> dict[str, Any]:
        return _section(self.get_merged_settings(), "logging")

    def set_strategy(self, strategy: str, scope: ScopeType = "project") -> None:
        """Persist the resolution strategy in the given scope.

        Raises:
            ValueError: Unknown strategy
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown resolution strategy '{strategy}'. Choose from: {', '.join(STRATEGIES)}")
        self._update_settings(self._scope_file(scope), {"resolution": {"strategy": strategy}})
        logger.info(f"Set {scope} resolution strategy to: {strategy}")

    def _scope_file(self, scope: ScopeType) -> Path:
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        return file_map.get(scope, self.project_settings_file)

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Returns:
            Settings dict or None if the file doesn't exist or can't be parsed
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {path}: expected a mapping")
            return None
        return data

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "w") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        existing = self._read_settings(path) or {}
        self._write_settings(path, self._deep_merge(existing, updates))

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries (overlay takes precedence)."""
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
