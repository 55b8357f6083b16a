"""Tests for staging the runtime package into a function's output."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from unittest import mock

import pytest

from caravan.build.runtime_bundle import install_requirements, stage_runtime
from caravan.exceptions import BuildError


@pytest.fixture()
def package_dir(tmp_path: Path) -> Path:
    package = tmp_path / "pkg" / "caravan"
    (package / "runtime" / "__pycache__").mkdir(parents=True)
    (package / "__init__.py").write_text("", encoding="utf-8")
    (package / "runtime" / "__main__.py").write_text("print('run')\n", encoding="utf-8")
    (package / "runtime" / "__pycache__" / "loop.cpython-312.pyc").write_bytes(b"\x00")
    return package


def test_stage_runtime_copies_package_without_bytecode(tmp_path: Path, package_dir: Path) -> None:
    work_path = tmp_path / "work"

    with mock.patch("caravan.build.runtime_bundle.install_requirements") as installer:
        site_dir = stage_runtime(work_path, package_dir=package_dir, requirements=("requests>=2.31",))

    assert site_dir == work_path / ".caravan"
    assert (site_dir / "caravan" / "runtime" / "__main__.py").read_text(encoding="utf-8") == "print('run')\n"
    assert not (site_dir / "caravan" / "runtime" / "__pycache__").exists()
    installer.assert_called_once_with(("requests>=2.31",), target=site_dir)


def test_stage_runtime_replaces_previous_copy(tmp_path: Path, package_dir: Path) -> None:
    stale = tmp_path / "work" / ".caravan" / "caravan" / "stale.py"
    stale.parent.mkdir(parents=True)
    stale.write_text("", encoding="utf-8")

    stage_runtime(tmp_path / "work", package_dir=package_dir, requirements=())

    assert not stale.exists()
    assert (tmp_path / "work" / ".caravan" / "caravan" / "__init__.py").exists()


def test_install_requirements_runs_pip_into_target(tmp_path: Path) -> None:
    with mock.patch("caravan.build.runtime_bundle.subprocess.run") as run:
        run.return_value = subprocess.CompletedProcess(args=[], returncode=0)
        install_requirements(("Werkzeug>=3.0",), target=tmp_path)

    command = run.call_args.args[0]
    assert command[:4] == [sys.executable, "-m", "pip", "install"]
    assert command[-3:] == ["--target", str(tmp_path), "Werkzeug>=3.0"]


def test_install_requirements_failure_is_a_build_error(tmp_path: Path) -> None:
    with mock.patch("caravan.build.runtime_bundle.subprocess.run") as run:
        run.return_value = subprocess.CompletedProcess(args=[], returncode=1)
        with pytest.raises(BuildError, match="exit code 1"):
            install_requirements(("Werkzeug>=3.0",), target=tmp_path)


def test_install_requirements_without_requirements_is_a_no_op(tmp_path: Path) -> None:
    with mock.patch("caravan.build.runtime_bundle.subprocess.run") as run:
        install_requirements((), target=tmp_path)

    run.assert_not_called()
