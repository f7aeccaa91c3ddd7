"""Build configuration (``[tool.resource-docs]`` in a TOML file)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .codegen_resource import DEFAULT_REGISTRY_URL

CONFIG_TABLE = "resource-docs"
DEFAULT_REPOSITORY_URL = "https://github.com/resource-docs/resources/tree/main"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class BuildConfig:
    """Settings of a batch documentation build."""

    resources_dir: Path
    readme_name: str = "README.md"
    index_path: Path | None = None
    template: Path | None = None
    registry_url: str = DEFAULT_REGISTRY_URL
    repository_url: str = DEFAULT_REPOSITORY_URL

    @property
    def resolved_index_path(self) -> Path:
        if self.index_path is not None:
            return self.index_path
        return self.resources_dir / self.readme_name

    def with_overrides(self, **overrides: Any) -> "BuildConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def load_config(config_path: str | Path, resources_dir: str | Path | None = None) -> BuildConfig:
    """Load build settings from *config_path*.

    Relative paths in the file are resolved against the file's directory. A
    missing file yields the defaults.
    """
    config_file = Path(config_path)
    root = config_file.parent.resolve()
    default_dir = Path(resources_dir) if resources_dir is not None else root

    if not config_file.exists():
        return BuildConfig(resources_dir=default_dir)

    try:
        data = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as err:
        raise ConfigError(f"unable to read '{config_file}': {err}") from err

    table = data.get("tool", {}).get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"'[tool.{CONFIG_TABLE}]' must be a table")

    known = {
        "resources-dir",
        "readme-name",
        "index-path",
        "template",
        "registry-url",
        "repository-url",
    }
    unknown = sorted(set(table) - known)
    if unknown:
        raise ConfigError(f"unknown configuration key '{unknown[0]}'")

    def _path(key: str) -> Path | None:
        value = table.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string")
        path = Path(value)
        return path if path.is_absolute() else root / path

    def _str(key: str, default: str) -> str:
        value = table.get(key, default)
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string")
        return value

    return BuildConfig(
        resources_dir=_path("resources-dir") or default_dir,
        readme_name=_str("readme-name", "README.md"),
        index_path=_path("index-path"),
        template=_path("template"),
        registry_url=_str("registry-url", DEFAULT_REGISTRY_URL),
        repository_url=_str("repository-url", DEFAULT_REPOSITORY_URL),
    )
