"""Command-line interface for commonjs-runtime."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import quickjs

from assets import (
    AssetNotFoundError,
    DirectoryAssetStore,
    MalformedJsonError,
    write_file_index,
)
from runtime import ModuleNotFound, Runtime
from runtime.config import (
    ConfigError,
    RuntimeConfig,
    load_config,
    resolve_resources_dir,
)
from runtime.resolution import describe
from runtime.sandbox import format_js_value

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Application root holding cjsrt.toml (default: .)",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default=None,
        help="Log level (default: config log_level)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cjsrt")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run the main module")
    _add_common_paths(run_parser)
    run_parser.add_argument(
        "--main",
        default=None,
        help="Entry module relative to the resources dir (default: config main)",
    )

    index_parser = subparsers.add_parser(
        "index", help="Write _index_.json for the resources dir"
    )
    _add_common_paths(index_parser)
    index_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern to leave out of the index (repeatable)",
    )

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print what a specifier resolves to"
    )
    _add_common_paths(resolve_parser)
    resolve_parser.add_argument("specifier", help="Module specifier to resolve")
    resolve_parser.add_argument(
        "--from",
        dest="from_filename",
        default="/",
        help="Virtual filename of the requiring module (default: /)",
    )

    return parser


def _configure_logging(config: RuntimeConfig, log_level: str | None) -> None:
    logging.basicConfig(
        level=log_level or config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _console_log(*args: Any) -> None:
    sys.stdout.write(" ".join(format_js_value(arg) for arg in args) + "\n")


def _make_store(root: Path, config: RuntimeConfig) -> DirectoryAssetStore:
    resources_dir = resolve_resources_dir(root, config.resources_dir)
    return DirectoryAssetStore(
        resources_dir,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    )


def _handle_run(root: Path, config: RuntimeConfig, main_file: str | None) -> int:
    if main_file is not None:
        config = config.model_copy(update={"main": main_file})
    runtime = Runtime(
        _make_store(root, config),
        config=config,
        host_globals={"console": {"log": _console_log}},
    )
    try:
        runtime.run_main()
    except (ModuleNotFound, MalformedJsonError, AssetNotFoundError, quickjs.JSException) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    return 0


def _handle_index(root: Path, config: RuntimeConfig, exclude: list[str]) -> int:
    resources_dir = resolve_resources_dir(root, config.resources_dir)
    if not resources_dir.is_dir():
        sys.stderr.write(f"resources-dir: {resources_dir}\n")
        sys.stderr.write("error: resources directory does not exist\n")
        return 2
    index_path = write_file_index(
        resources_dir,
        exclude_patterns=[*config.exclude, *exclude],
        nested_gitignore=config.nested_gitignore,
    )
    sys.stdout.write(f"{index_path}\n")
    return 0


def _handle_resolve(
    root: Path, config: RuntimeConfig, specifier: str, from_filename: str
) -> int:
    runtime = Runtime(_make_store(root, config), config=config)
    try:
        resolution = runtime.resolve(specifier, from_filename)
    except MalformedJsonError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    if not resolution:
        sys.stderr.write(f"error: {ModuleNotFound(specifier)}\n")
        return 1
    sys.stdout.write(f"{describe(resolution)}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    root = Path(args.root).expanduser().resolve()

    try:
        config = load_config(root)
        _configure_logging(config, args.log_level)

        if args.command == "run":
            return _handle_run(root, config, args.main)

        if args.command == "index":
            return _handle_index(root, config, args.exclude)

        if args.command == "resolve":
            return _handle_resolve(root, config, args.specifier, args.from_filename)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
