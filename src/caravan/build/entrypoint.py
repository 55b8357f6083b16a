"""Per-entrypoint build: run the builder, relocate its cache, package the output."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from caravan.build.args import normalize_builder_args
from caravan.build.bootstrap_script import write_bootstrap
from caravan.build.config import CaravanConfig, FunctionConfig, load_config
from caravan.build.manifest import build_manifest_page, update_manifest
from caravan.build.runtime_bundle import stage_runtime
from caravan.constants.build import (
    BUILDER_CACHE_ENV,
    CACHE_DIRNAME,
    INDEX_NAME,
    MANIFEST_FILENAME,
    OUTPUT_DIRNAME,
    PAGES_SUBDIR,
)
from caravan.constants.cache import GEN_FILE_SUBDIR
from caravan.constants.runtime import ENTRYPOINT_ENV, HANDLER_ENV, TASK_ROOT_ENV
from caravan.exceptions import BuildError
from caravan.io import copy_into
from caravan.relocation import move_cache_files

logger = logging.getLogger(__name__)

BUILDER_DIR: Path = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class BuildResult:
    """Outcome of building a single entrypoint."""

    entrypoint: str
    output_name: str
    work_path: Path
    source_files: tuple[str, ...]
    included_files: tuple[str, ...]


def build_project(root: Path, *, config: CaravanConfig | None = None, debug: bool = False) -> list[BuildResult]:
    """Build every entrypoint matched by the configured globs."""
    root = root.resolve()
    if config is None:
        config = load_config(root)

    entrypoints = discover_entrypoints(root, config.entrypoints)
    for configured in sorted(set(config.functions) - set(entrypoints)):
        logger.warning("Function config for %s matches no entrypoint", configured)

    return [build_entrypoint(root, entrypoint, config, debug=debug) for entrypoint in entrypoints]


def discover_entrypoints(root: Path, patterns: tuple[str, ...]) -> list[str]:
    """Return root-relative POSIX paths of the files matched by ``patterns``."""
    found: set[str] = set()
    for pattern in patterns:
        for path in root.glob(pattern):
            if path.is_file():
                found.add(path.relative_to(root).as_posix())
    return sorted(found)


def entrypoint_output_name(entrypoint: str) -> str:
    """Map ``api/foo.py`` to ``api/foo/index`` and ``api/index.py`` to ``api/index``.

    ``index`` is enforced as the last segment so that nested entrypoints do not
    collide with their parent directory.
    """
    path = PurePosixPath(entrypoint)
    name = path.parent / path.stem
    if path.stem != INDEX_NAME:
        name = name / INDEX_NAME
    return name.as_posix()


def build_entrypoint(
    root: Path,
    entrypoint: str,
    config: CaravanConfig,
    *,
    builder_dir: Path = BUILDER_DIR,
    debug: bool = False,
) -> BuildResult:
    """Build one entrypoint into ``.output/server/pages/<name>``."""
    function = config.function_for(entrypoint)
    output_path = root / OUTPUT_DIRNAME
    output_name = entrypoint_output_name(entrypoint)
    work_path = output_path / PAGES_SUBDIR / output_name
    logger.info("Compiling %s to %s", entrypoint, work_path)
    work_path.mkdir(parents=True, exist_ok=True)

    source_files = {entrypoint}
    argv = normalize_builder_args(
        function.args,
        entrypoint_dir=(root / entrypoint).parent,
        root=root,
        source_files=source_files,
    )
    run_builder(
        [*(config.builder or _default_builder()), *argv],
        cwd=root,
        env=_builder_env(root, entrypoint, work_path, function, builder_dir=builder_dir, debug=debug),
    )

    gen_file_dir = work_path / CACHE_DIRNAME / GEN_FILE_SUBDIR
    move_cache_files(gen_file_dir, str(builder_dir), config.execution_root)
    move_cache_files(gen_file_dir, str(root), config.execution_root, source_files)

    write_bootstrap(work_path, function.env, config.execution_root)
    stage_runtime(work_path)

    logger.info("Detected source files:")
    for filename in sorted(source_files):
        logger.info(" - %s", filename)
        _copy(filename, root, work_path)

    included = collect_include_files(root, entrypoint, function.include_files)
    if included:
        logger.info("Including additional files:")
        for filename in included:
            logger.info(" - %s", filename)
            _copy(filename, root, work_path)

    update_manifest(output_path / MANIFEST_FILENAME, output_name, build_manifest_page(entrypoint, function))

    return BuildResult(
        entrypoint=entrypoint,
        output_name=output_name,
        work_path=work_path,
        source_files=tuple(sorted(source_files)),
        included_files=tuple(included),
    )


def run_builder(command: list[str], *, cwd: Path, env: dict[str, str]) -> None:
    """Run the external builder and fail the build on a non-zero exit."""
    logger.debug("Running builder: %s", command)
    try:
        completed = subprocess.run(command, cwd=cwd, env=env, check=False)
    except OSError as exc:
        raise BuildError(f"Unable to run builder {command[0]!r}: {exc}") from exc
    if completed.returncode != 0:
        raise BuildError(f"Build script failed with exit code {completed.returncode}")


def collect_include_files(root: Path, entrypoint: str, patterns: tuple[str, ...]) -> list[str]:
    """Resolve ``includeFiles`` globs, written relative to the entrypoint, to root-relative files."""
    entrypoint_dir = (root / entrypoint).parent
    matches: set[str] = set()
    for pattern in patterns:
        relative_pattern = Path(os.path.relpath(entrypoint_dir / pattern, root)).as_posix()
        for path in root.glob(relative_pattern):
            if path.is_file():
                matches.add(path.relative_to(root).as_posix())
    return sorted(matches)


def _builder_env(
    root: Path,
    entrypoint: str,
    work_path: Path,
    function: FunctionConfig,
    *,
    builder_dir: Path,
    debug: bool,
) -> dict[str, str]:
    env = {
        **os.environ,
        **function.env,
        "BUILDER": str(builder_dir),
        "ROOT_DIR": str(work_path),
        ENTRYPOINT_ENV: entrypoint,
        "TOOLCHAIN_VERSION": function.toolchain_version,
        BUILDER_CACHE_ENV: str(work_path / CACHE_DIRNAME),
        TASK_ROOT_ENV: str(root),
    }
    env.pop(HANDLER_ENV, None)
    if debug:
        env["DEBUG"] = "1"
    return env


def _default_builder() -> list[str]:
    # Without _HANDLER the runtime only imports ENTRYPOINT, which primes caches.
    return [sys.executable, "-m", "caravan.runtime"]


def _copy(filename: str, root: Path, work_path: Path) -> None:
    try:
        copy_into(filename, source_root=root, dest_root=work_path)
    except OSError as exc:
        raise BuildError(f"Unable to copy {filename} into {work_path}: {exc}") from exc
