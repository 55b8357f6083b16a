"""Staging of the runtime package and its dependencies inside a function's output."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from caravan.constants.build import RUNTIME_PIP_ARGS, RUNTIME_REQUIREMENTS, RUNTIME_SITE_DIRNAME
from caravan.exceptions import BuildError

logger = logging.getLogger(__name__)

PACKAGE_DIR: Path = Path(__file__).resolve().parents[1]


def stage_runtime(
    work_path: Path,
    *,
    package_dir: Path = PACKAGE_DIR,
    requirements: Sequence[str] = RUNTIME_REQUIREMENTS,
) -> Path:
    """Copy the ``caravan`` package and install its runtime requirements under ``work_path``.

    Everything lands in one site directory that the generated ``bootstrap``
    puts on ``PYTHONPATH``. A previously staged package is replaced.
    """
    site_dir = work_path / RUNTIME_SITE_DIRNAME
    target = site_dir / package_dir.name
    logger.info("Staging runtime into %s", site_dir)
    try:
        if target.exists():
            shutil.rmtree(target)
        shutil.copytree(package_dir, target, ignore=shutil.ignore_patterns("__pycache__", "*.pyc"))
    except OSError as exc:
        raise BuildError(f"Unable to stage runtime package into {site_dir}: {exc}") from exc

    install_requirements(requirements, target=site_dir)
    return site_dir


def install_requirements(requirements: Sequence[str], *, target: Path) -> None:
    """Install ``requirements`` into ``target`` with the current interpreter's pip."""
    if not requirements:
        return

    command = [sys.executable, "-m", "pip", *RUNTIME_PIP_ARGS, "--target", str(target), *requirements]
    logger.debug("Installing runtime dependencies: %s", command)
    try:
        completed = subprocess.run(command, check=False)
    except OSError as exc:
        raise BuildError(f"Unable to run pip: {exc}") from exc
    if completed.returncode != 0:
        raise BuildError(f"Installing runtime dependencies failed with exit code {completed.returncode}")
