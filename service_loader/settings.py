"""Settings for service-loader.

Scope-aware YAML settings, most specific scope wins:
1. local (.service-loader/settings.local.yaml) - gitignored, machine-specific
2. project (.service-loader/settings.yaml) - committed, team-shared
3. global (~/.service-loader/settings.yaml) - user defaults

All options live under a top-level ``loader:`` key:

    loader:
      search_paths: [plugins/, vendor/providers.zip]
      include_sys_path: true
      resource_prefix: META-INF/services
      strict: false
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .resources import DEFAULT_PREFIX

logger = logging.getLogger(__name__)

SEARCH_PATH_ENV = "SERVICE_LOADER_PATH"


class LoaderSettings(BaseModel):
    """Options controlling where and how providers are discovered."""

    search_paths: list[Path] = Field(default_factory=list)
    include_sys_path: bool = True
    resource_prefix: str = DEFAULT_PREFIX
    strict: bool = False


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard layout."""
        return cls(
            global_settings=Path.home() / ".service-loader" / "settings.yaml",
            project_settings=Path.cwd() / ".service-loader" / "settings.yaml",
            local_settings=Path.cwd() / ".service-loader" / "settings.local.yaml",
        )

    def in_order(self) -> list[Path]:
        """Return paths from least to most specific."""
        return [self.global_settings, self.project_settings, self.local_settings]


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read one settings file, returning {} when missing or malformed."""
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return {}
    if not isinstance(content, dict):
        logger.warning(f"Ignoring {path}: expected a mapping at top level")
        return {}
    return content


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base; nested dicts merge, everything else replaces."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(paths: SettingsPaths | None = None) -> LoaderSettings:
    """Load and merge settings from all scopes plus the environment.

    Relative search paths are resolved against the directory holding the
    ``.service-loader`` folder that declared them (project root or home).
    Roots from SERVICE_LOADER_PATH come first.

    Raises:
        ValueError: The merged settings are invalid
    """
    paths = paths or SettingsPaths.default()

    merged: dict[str, Any] = {}
    for path in paths.in_order():
        section = _read_yaml(path).get("loader") or {}
        if not isinstance(section, dict):
            logger.warning(f"Ignoring 'loader' section in {path}: expected a mapping")
            continue
        if isinstance(section.get("search_paths"), list):
            scope_root = path.parent.parent
            search_paths = [scope_root / p if isinstance(p, str) else p for p in section["search_paths"]]
            section = {**section, "search_paths": search_paths}
        merged = _merge(merged, section)

    try:
        settings = LoaderSettings(**merged)
    except ValidationError as e:
        raise ValueError(f"Invalid service-loader settings: {e}") from e

    if env_value := os.environ.get(SEARCH_PATH_ENV):
        env_paths = [Path(p) for p in env_value.split(os.pathsep) if p]
        settings = settings.model_copy(update={"search_paths": env_paths + settings.search_paths})

    return settings
