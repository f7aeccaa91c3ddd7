"""Batch generation of resource documents and the aggregate index."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Union

from .codegen_resource import DEFAULT_REGISTRY_URL, generate
from .config import DEFAULT_REPOSITORY_URL, BuildConfig
from .discovery import DiscoveredResource, FileSystem, ResourceLoadError, discover_resources
from .logging import get_logger
from .schema import Resource, load_resource
from .view import View, default_view

INDEX_TITLE = "# resources"
INDEX_INTRO = "resources for any occasion"


@dataclass(frozen=True)
class Built:
    """A resource whose document was written."""

    name: str
    path: Path
    description: str


@dataclass(frozen=True)
class Skipped:
    """A resource left out of the build."""

    name: str
    reason: str


BuildResult = Union[Built, Skipped]


@dataclass
class BuildReport:
    """Outcome of a batch build."""

    built: list[Built] = field(default_factory=list)
    skipped: list[Skipped] = field(default_factory=list)
    index_path: Path | None = None

    @property
    def names(self) -> list[str]:
        return [item.name for item in self.built]


def resolve_resource(name: str, module: Any) -> Resource:
    """Return the descriptor *module* exports under its own *name*.

    The module's ``dependencies`` field is carried over onto the descriptor.
    """
    descriptor = _export(module, name)
    if descriptor is None:
        raise ResourceLoadError(f"resource '{name}' does not export '{name}'")
    own_name = _export(descriptor, "name")
    return load_resource(
        descriptor,
        name=own_name if isinstance(own_name, str) and own_name else name,
        dependencies=_export(module, "dependencies"),
    )


def build_resource(
    name: str,
    entry: Any,
    *,
    output_dir: Path,
    view: View,
    fs: FileSystem,
    logger: logging.Logger,
    readme_name: str = "README.md",
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> BuildResult:
    """Generate and write the document of a single discovered entry.

    Never raises; any failure is logged and reported as :class:`Skipped`.
    """
    location = entry.path if isinstance(entry, DiscoveredResource) else output_dir / name
    logger.warning("attempting to load %s", name)
    try:
        module = entry.load() if isinstance(entry, DiscoveredResource) else entry
        resource = resolve_resource(name, module)
        document = generate(resource, view, registry_url)
        path = location / readme_name
        fs.write_text(path, document)
    except ResourceLoadError as err:
        logger.error("skipping %s: %s", name, err)
        return Skipped(name=name, reason=str(err))
    except Exception as err:
        logger.error("skipping %s: %s", name, err, exc_info=True)
        return Skipped(name=name, reason=f"{type(err).__name__}: {err}")

    logger.info("wrote to %s", path.resolve())
    return Built(name=name, path=path, description=resource.description)


def build_all(
    discovered: Mapping[str, Any],
    *,
    output_dir: str | Path,
    view: View | None = None,
    fs: FileSystem | None = None,
    logger: logging.Logger | None = None,
    readme_name: str = "README.md",
    index_path: str | Path | None = None,
    registry_url: str = DEFAULT_REGISTRY_URL,
    repository_url: str = DEFAULT_REPOSITORY_URL,
) -> BuildReport:
    """Write a document for every entry of *discovered* plus the aggregate index.

    Parameters
    ----------
    discovered:
        Resource name mapped to a :class:`DiscoveredResource` or to an
        already loaded module. Entries are processed in mapping order.
    output_dir:
        Directory holding one sub-directory per loaded module entry and,
        unless *index_path* is given, the aggregate index.
    """
    view = view or default_view()
    fs = fs or FileSystem()
    logger = logger or get_logger("build")
    root = Path(output_dir)

    report = BuildReport()
    for name, entry in discovered.items():
        result = build_resource(
            name,
            entry,
            output_dir=root,
            view=view,
            fs=fs,
            logger=logger,
            readme_name=readme_name,
            registry_url=registry_url,
        )
        if isinstance(result, Built):
            report.built.append(result)
        else:
            report.skipped.append(result)

    target = Path(index_path) if index_path is not None else root / readme_name
    fs.write_text(target, build_index(report.built, repository_url))
    logger.info("wrote aggregate index to %s", target)
    report.index_path = target
    return report


def build_from_config(
    config: BuildConfig,
    *,
    fs: FileSystem | None = None,
    logger: logging.Logger | None = None,
) -> BuildReport:
    """Discover the resources of *config* and build them."""
    fs = fs or FileSystem()
    logger = logger or get_logger("build")
    if config.template is not None:
        view = View(fs.read_text(config.template))
    else:
        view = default_view()
    return build_all(
        discover_resources(config.resources_dir, fs, logger),
        output_dir=config.resources_dir,
        view=view,
        fs=fs,
        logger=logger,
        readme_name=config.readme_name,
        index_path=config.resolved_index_path,
        registry_url=config.registry_url,
        repository_url=config.repository_url,
    )


def build_index(built: Iterable[Built], repository_url: str = DEFAULT_REPOSITORY_URL) -> str:
    """Return the aggregate index linking every built resource."""
    base = repository_url.rstrip("/")
    text = f"{INDEX_TITLE}\n\n{INDEX_INTRO}\n\n"
    for item in built:
        text += f" - [{item.name}]({base}/{item.name}) {item.description}\n"
    return text


def _export(module: Any, name: str) -> Any:
    if isinstance(module, Mapping):
        return module.get(name)
    return getattr(module, name, None)
