"""Rendering of the ``bootstrap`` script the platform executes on cold start."""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from pathlib import Path
from string import Template

from caravan.constants.build import (
    BOOTSTRAP_FILENAME,
    BOOTSTRAP_MODE,
    BOOTSTRAP_TEMP_PREFIX,
    BOOTSTRAP_TEMP_SUFFIX,
    BOOTSTRAP_TEMPLATE,
    RUNTIME_SITE_DIRNAME,
)
from caravan.io import write_text_atomic


def render_bootstrap(env: Mapping[str, str], execution_root: str) -> str:
    """Render the script with one shell-quoted ``export`` per function env var."""
    exports = "\n".join(f"export {name}={shlex.quote(value)}" for name, value in env.items())
    return Template(BOOTSTRAP_TEMPLATE).substitute(
        env=exports,
        execution_root=execution_root,
        site_dir=RUNTIME_SITE_DIRNAME,
    )


def write_bootstrap(work_path: Path, env: Mapping[str, str], execution_root: str) -> Path:
    """Write an executable ``bootstrap`` into ``work_path``."""
    path = work_path / BOOTSTRAP_FILENAME
    write_text_atomic(
        path=path,
        content=render_bootstrap(env, execution_root),
        temp_prefix=BOOTSTRAP_TEMP_PREFIX,
        temp_suffix=BOOTSTRAP_TEMP_SUFFIX,
        mode=BOOTSTRAP_MODE,
    )
    return path
