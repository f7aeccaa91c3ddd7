"""Discovery and loading of resource modules on disk."""

from __future__ import annotations

import importlib.util
import logging
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

from .logging import get_logger


class ResourceLoadError(RuntimeError):
    """Raised when a discovered resource cannot be loaded or resolved."""


class FileSystem:
    """Thin wrapper around the file operations used by a build."""

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def list_entries(self, directory: Path) -> list[str]:
        return sorted(os.listdir(directory))

    def stat_entry(self, path: Path) -> os.stat_result:
        return path.stat()


@dataclass(frozen=True)
class DiscoveredResource:
    """A resource found on disk together with the means to load it."""

    name: str
    path: Path
    loader: Callable[[], Any]

    def load(self) -> Any:
        return self.loader()


def discover_resources(
    directory: str | Path,
    fs: FileSystem | None = None,
    logger: logging.Logger | None = None,
) -> dict[str, DiscoveredResource]:
    """Return every resource package below *directory*, keyed by name.

    Hidden entries, private entries and plain files are skipped.
    """
    fs = fs or FileSystem()
    logger = logger or get_logger("discovery")
    root = Path(directory)
    discovered: dict[str, DiscoveredResource] = {}
    for name in fs.list_entries(root):
        if name.startswith((".", "_")):
            continue
        path = root / name
        try:
            info = fs.stat_entry(path)
        except OSError as err:
            logger.warning("unable to stat %s: %s", path, err)
            continue
        if not _is_dir(info):
            logger.debug("skipping %s, not a directory", path)
            continue
        discovered[name] = DiscoveredResource(
            name=name,
            path=path,
            loader=_module_loader(name, path),
        )
    return discovered


def load_module(name: str, path: str | Path) -> ModuleType:
    """Import the resource package at *path*."""
    init_file = Path(path) / "__init__.py"
    if not init_file.is_file():
        raise ResourceLoadError(f"resource '{name}' has no __init__.py")

    module_name = f"_resource_docs_resource_{name}"
    spec = importlib.util.spec_from_file_location(
        module_name,
        init_file,
        submodule_search_locations=[str(path)],
    )
    if spec is None or spec.loader is None:
        raise ResourceLoadError(f"unable to import resource '{name}' from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as err:
        sys.modules.pop(module_name, None)
        raise ResourceLoadError(f"unable to import resource '{name}': {err}") from err
    return module


def _module_loader(name: str, path: Path) -> Callable[[], ModuleType]:
    def loader() -> ModuleType:
        return load_module(name, path)

    return loader


def _is_dir(info: os.stat_result) -> bool:
    return stat.S_ISDIR(info.st_mode)
