"""CLI entrypoint for Caravan."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from caravan import __version__
from caravan.build import build_project, load_config
from caravan.constants.branding import CLI_DESCRIPTION
from caravan.constants.build import DEFAULT_EXECUTION_ROOT, TRUTHY_VALUES
from caravan.constants.devserver import DEV_SERVER_HOST
from caravan.dev import start_dev_server
from caravan.exceptions import CaravanError, ConfigError
from caravan.relocation import move_cache_files


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="caravan",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build every configured function entrypoint")
    build.add_argument("-r", "--root", type=Path, default=Path("."), help="Project root path")
    build.add_argument("-c", "--config", type=Path, help="Explicit config file")
    build.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    relocate = subparsers.add_parser("relocate", help="Relocate a toolchain cache to a new absolute root")
    relocate.add_argument("--cache-dir", type=Path, required=True, help="Cache gen/file directory")
    relocate.add_argument("--from", dest="old_root", required=True, help="Absolute root the cache was built at")
    relocate.add_argument(
        "--to",
        dest="new_root",
        default=DEFAULT_EXECUTION_ROOT,
        help=f"Absolute root the cache will be used from (default: {DEFAULT_EXECUTION_ROOT})",
    )
    relocate.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    dev = subparsers.add_parser("dev", help="Serve a built entrypoint locally")
    dev.add_argument("entrypoint", help="Entrypoint path relative to the project root")
    dev.add_argument("-r", "--root", type=Path, default=Path("."), help="Project root path")
    dev.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    debug = args.verbose or os.environ.get("DEBUG", "").strip().lower() in TRUTHY_VALUES
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format="%(levelname)s %(message)s")

    try:
        if args.command == "build":
            return _handle_build(args, debug=debug)
        if args.command == "relocate":
            return _handle_relocate(args)
        if args.command == "dev":
            return _handle_dev(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except CaravanError as exc:
        print(f"Build error: {exc}", file=sys.stderr)
        return 1

    parser.error(f"Unsupported command: {args.command}")
    return 2


def _handle_build(args: argparse.Namespace, *, debug: bool) -> int:
    root = args.root.resolve()
    if not root.is_dir():
        print(f"Configuration error: root directory does not exist: {root}", file=sys.stderr)
        return 2

    config = load_config(root, args.config)
    results = build_project(root, config=config, debug=debug)
    if not results:
        print("No entrypoints matched.")
        return 0
    for result in results:
        print(f"Built {result.entrypoint} -> {result.work_path} ({len(result.source_files)} source files)")
    return 0


def _handle_relocate(args: argparse.Namespace) -> int:
    for root in (args.old_root, args.new_root):
        if not root.startswith("/"):
            print(f"Configuration error: root must be an absolute path: {root}", file=sys.stderr)
            return 2

    source_files: set[str] = set()
    result = move_cache_files(args.cache_dir, args.old_root, args.new_root, source_files)
    print(
        f"Patched {len(result.patched_files)} cache files, moved {len(result.moved_entries)} entries, "
        f"removed {len(result.removed_dirs)} empty directories."
    )
    for filename in sorted(source_files):
        print(f" - {filename}")
    return 0


def _handle_dev(args: argparse.Namespace) -> int:
    server = start_dev_server(args.entrypoint, args.root.resolve())
    print(f"Listening on http://{DEV_SERVER_HOST}:{server.port} (pid {server.pid})")
    try:
        return server.process.wait()
    except KeyboardInterrupt:
        server.process.terminate()
        return server.process.wait()


if __name__ == "__main__":
    raise SystemExit(main())
