"""Command line interface for resource-docs."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from .build import build_from_config
from .codegen_resource import DEFAULT_REGISTRY_URL, generate
from .config import ConfigError, load_config
from .discovery import FileSystem
from .logging import configure_logging, get_logger
from .schema import load_schema
from .view import View, default_view

Handler = Callable[[argparse.Namespace], int]


def _handle_gen_docs(args: argparse.Namespace) -> int:
    """Render the document of a single resource descriptor."""
    resource = load_schema(args.schema)
    view = View(FileSystem().read_text(Path(args.template))) if args.template else default_view()
    rendered = generate(resource, view, args.registry_url)
    if args.output is None:
        sys.stdout.write(rendered)
        return 0
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")
    get_logger("cli").info("wrote to %s", output)
    return 0


def _handle_build(args: argparse.Namespace) -> int:
    """Build the documents of every resource in a directory."""
    directory = Path(args.directory)
    config_path = Path(args.config) if args.config else directory / "pyproject.toml"
    try:
        config = load_config(config_path, resources_dir=directory)
    except ConfigError as err:
        get_logger("cli").error("%s", err)
        return 2
    config = config.with_overrides(
        resources_dir=directory,
        index_path=Path(args.index) if args.index else None,
        template=Path(args.template) if args.template else None,
    )
    report = build_from_config(config)
    if report.skipped and args.strict:
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="resource-docs",
        description="Generate Markdown documentation from resource schemas.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--log-file", help="Also write log records to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen_docs = subparsers.add_parser("gen-docs", help="Document a single resource.")
    gen_docs.add_argument("schema", help="JSON resource descriptor.")
    gen_docs.add_argument("-o", "--output", help="Output file (defaults to stdout).")
    gen_docs.add_argument("--template", help="Custom document template.")
    gen_docs.add_argument(
        "--registry-url",
        default=DEFAULT_REGISTRY_URL,
        help="Base URL of dependency links.",
    )
    gen_docs.set_defaults(func=_handle_gen_docs)

    build = subparsers.add_parser("build", help="Document every resource in a directory.")
    build.add_argument("directory", help="Resources directory.")
    build.add_argument("--config", help="TOML file with a [tool.resource-docs] table.")
    build.add_argument("--index", help="Path of the aggregate index.")
    build.add_argument("--template", help="Custom document template.")
    build.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when a resource was skipped.",
    )
    build.set_defaults(func=_handle_build)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)
    handler: Handler = args.func
    return handler(args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
