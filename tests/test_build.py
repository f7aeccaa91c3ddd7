"""Tests for batch builds and the aggregate index."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from types import SimpleNamespace

import pytest

from resource_docs.build import (
    Built,
    Skipped,
    build_all,
    build_from_config,
    build_index,
    build_resource,
    resolve_resource,
)
from resource_docs.config import BuildConfig
from resource_docs.discovery import (
    DiscoveredResource,
    FileSystem,
    ResourceLoadError,
    discover_resources,
)
from resource_docs.view import View

LOGGER = logging.getLogger("tests.build")


def _module_a() -> SimpleNamespace:
    return SimpleNamespace(
        A={"name": "A", "schema": {"description": "first resource", "properties": {"x": 1}}},
        dependencies={"jinja2": "3.1.0"},
    )


def test_build_all_skips_module_without_export(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="tests.build")
    discovered = {"A": _module_a(), "B": SimpleNamespace(dependencies={})}

    report = build_all(discovered, output_dir=tmp_path, logger=LOGGER)

    assert report.names == ["A"]
    assert [item.name for item in report.skipped] == ["B"]
    assert (tmp_path / "A" / "README.md").exists()
    assert not (tmp_path / "B").exists()
    assert "does not export 'B'" in caplog.text

    index = (tmp_path / "README.md").read_text()
    assert "[A](" in index
    assert "first resource" in index
    assert "[B](" not in index


def test_build_all_carries_module_dependencies(tmp_path: Path) -> None:
    build_all({"A": _module_a()}, output_dir=tmp_path, logger=LOGGER)

    readme = (tmp_path / "A" / "README.md").read_text()
    assert "- [jinja2](https://pypi.org/project/jinja2) v3.1.0" in readme


def test_build_all_continues_after_failures(tmp_path: Path, caplog) -> None:
    def broken_loader():
        raise ResourceLoadError("unable to import resource 'broken'")

    class FlakyFileSystem(FileSystem):
        def write_text(self, path: Path, text: str) -> None:
            if path.parent.name == "flaky":
                raise OSError("disk full")
            super().write_text(path, text)

    discovered = {
        "broken": DiscoveredResource("broken", tmp_path / "broken", broken_loader),
        "flaky": SimpleNamespace(flaky={"schema": {"description": "never written"}}),
        "A": _module_a(),
    }

    report = build_all(
        discovered,
        output_dir=tmp_path,
        fs=FlakyFileSystem(),
        logger=LOGGER,
        view=View("{{ name }}"),
    )

    assert report.names == ["A"]
    assert report.skipped == [
        Skipped("broken", "unable to import resource 'broken'"),
        Skipped("flaky", "OSError: disk full"),
    ]
    assert "disk full" in caplog.text
    assert (tmp_path / "A" / "README.md").read_text() == "A\n"


def test_build_all_index_path(tmp_path: Path) -> None:
    index_path = tmp_path / "top" / "INDEX.md"

    report = build_all(
        {"A": _module_a()}, output_dir=tmp_path, logger=LOGGER, index_path=index_path
    )

    assert report.index_path == index_path
    assert index_path.read_text().startswith("# resources\n\n")
    assert not (tmp_path / "README.md").exists()


def test_build_resource_returns_built(tmp_path: Path) -> None:
    result = build_resource(
        "A",
        _module_a(),
        output_dir=tmp_path,
        view=View("{{ desc }}"),
        fs=FileSystem(),
        logger=LOGGER,
    )

    assert result == Built("A", tmp_path / "A" / "README.md", "first resource")


def test_resolve_resource_uses_entry_name_as_fallback() -> None:
    module = {"logger": {"schema": {"description": "logs"}}, "dependencies": {"colors": "*"}}

    resource = resolve_resource("logger", module)

    assert resource.name == "logger"
    assert resource.dependencies == (("colors", "*"),)


def test_resolve_resource_missing_export() -> None:
    with pytest.raises(ResourceLoadError, match="does not export 'gone'"):
        resolve_resource("gone", SimpleNamespace())


def test_build_index_lists_resources_in_order() -> None:
    built = [
        Built("b", Path("b/README.md"), "second"),
        Built("a", Path("a/README.md"), ""),
    ]

    assert build_index(built, "https://example.org/tree/main/") == (
        "# resources\n\n"
        "resources for any occasion\n\n"
        " - [b](https://example.org/tree/main/b) second\n"
        " - [a](https://example.org/tree/main/a) \n"
    )


def _write_package(root: Path, name: str, body: str) -> None:
    package = root / name
    package.mkdir()
    (package / "__init__.py").write_text(textwrap.dedent(body))


def test_build_from_config_discovers_packages(tmp_path: Path) -> None:
    resources_dir = tmp_path / "resources"
    resources_dir.mkdir()
    _write_package(
        resources_dir,
        "alpha",
        """
        from resource_docs.schema import method


        @method({"description": "say hello", "properties": {"who": {"type": "string"}}})
        def greet(who):
            return "hello " + who


        alpha = {
            "name": "alpha",
            "schema": {"description": "greets people", "properties": {"greeting": "hi"}},
            "methods": {"greet": greet},
        }

        dependencies = {"colors": "*"}
        """,
    )
    _write_package(resources_dir, "broken", "raise RuntimeError('boom')\n")
    _write_package(resources_dir, "missing", "something_else = {}\n")
    (resources_dir / ".hidden").mkdir()
    (resources_dir / "notes.txt").write_text("not a resource")

    report = build_from_config(BuildConfig(resources_dir=resources_dir), logger=LOGGER)

    assert report.names == ["alpha"]
    assert sorted(item.name for item in report.skipped) == ["broken", "missing"]
    readme = (resources_dir / "alpha" / "README.md").read_text()
    assert "### alpha.greet(who)" in readme
    assert "- [colors](https://pypi.org/project/colors)\n" in readme
    index = (resources_dir / "README.md").read_text()
    assert "[alpha](" in index
    assert "greets people" in index


def test_discover_resources_skips_files(tmp_path: Path) -> None:
    (tmp_path / "beta").mkdir()
    (tmp_path / "alpha").mkdir()
    (tmp_path / "_private").mkdir()
    (tmp_path / "README.md").write_text("")

    discovered = discover_resources(tmp_path)

    assert list(discovered) == ["alpha", "beta"]
    assert discovered["alpha"].path == tmp_path / "alpha"


def test_discovered_resource_without_init(tmp_path: Path) -> None:
    (tmp_path / "empty").mkdir()

    entry = discover_resources(tmp_path)["empty"]

    with pytest.raises(ResourceLoadError, match="no __init__.py"):
        entry.load()


def test_discover_resources_logs_through_given_logger(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="tests.build")
    (tmp_path / "notes.txt").write_text("")

    assert discover_resources(tmp_path, logger=LOGGER) == {}

    assert [record.name for record in caplog.records] == ["tests.build"]
    assert "not a directory" in caplog.text


def test_build_from_config_reads_template_through_file_system(tmp_path: Path) -> None:
    class RecordingFileSystem(FileSystem):
        def __init__(self) -> None:
            self.reads: list[Path] = []

        def read_text(self, path: Path) -> str:
            self.reads.append(path)
            return super().read_text(path)

    resources_dir = tmp_path / "resources"
    resources_dir.mkdir()
    _write_package(resources_dir, "beta", 'beta = {"schema": {"description": "second"}}\n')
    template = tmp_path / "custom.md.j2"
    template.write_text("custom {{ name }}")
    fs = RecordingFileSystem()

    build_from_config(
        BuildConfig(resources_dir=resources_dir, template=template), fs=fs, logger=LOGGER
    )

    assert fs.reads == [template]
    assert (resources_dir / "beta" / "README.md").read_text() == "custom beta\n"
