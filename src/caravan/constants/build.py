"""Build step defaults, filenames and manifest constants."""

from __future__ import annotations

CONFIG_FILENAME: str = "caravan.yaml"

DEFAULT_ENTRYPOINT_GLOBS: tuple[str, ...] = ("api/**/*.py",)
DEFAULT_EXECUTION_ROOT: str = "/var/task"
DEFAULT_TOOLCHAIN_VERSION: str = "v1.15.2"

OUTPUT_DIRNAME: str = ".output"
PAGES_SUBDIR: str = "server/pages"
INDEX_NAME: str = "index"

MANIFEST_FILENAME: str = "functions-manifest.json"
MANIFEST_VERSION: int = 1
MANIFEST_RUNTIME: str = "provided.al2"
MANIFEST_TEMP_PREFIX: str = ".manifest-"
MANIFEST_TEMP_SUFFIX: str = ".tmp"

BOOTSTRAP_FILENAME: str = "bootstrap"
BOOTSTRAP_MODE: int = 0o755

# Builder flags whose values are file paths relative to the entrypoint.
PATH_FLAGS: tuple[str, ...] = ("--cert", "--config", "--import-map", "--lock")
FLAG_ALIASES: dict[str, str] = {"-c": "--config"}
DEFAULT_BUILDER_FLAGS: tuple[str, ...] = ("--allow-all",)

TRUTHY_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "y", "on"})

CACHE_DIRNAME: str = ".deno"
BUILDER_CACHE_ENV: str = "DENO_DIR"

# Runtime package and its third-party dependencies, staged next to each function.
RUNTIME_SITE_DIRNAME: str = ".caravan"
RUNTIME_REQUIREMENTS: tuple[str, ...] = ("requests>=2.31", "Werkzeug>=3.0")
RUNTIME_PIP_ARGS: tuple[str, ...] = ("install", "--quiet", "--no-compile", "--upgrade")

BOOTSTRAP_TEMP_PREFIX: str = ".bootstrap-"
BOOTSTRAP_TEMP_SUFFIX: str = ".tmp"
BOOTSTRAP_TEMPLATE: str = """#!/bin/sh
set -eu
$env
export LAMBDA_TASK_ROOT="$${LAMBDA_TASK_ROOT:-$execution_root}"
cd "$$LAMBDA_TASK_ROOT"
export PYTHONPATH="$$LAMBDA_TASK_ROOT/$site_dir$${PYTHONPATH:+:$$PYTHONPATH}"
exec "$${CARAVAN_PYTHON:-python3}" -m caravan.runtime
"""
