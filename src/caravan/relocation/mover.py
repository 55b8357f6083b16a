"""Walk a toolchain cache, relocate its documents and move cached artifacts."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from caravan.constants.cache import (
    BUILDINFO_EXTENSION,
    CACHE_FILE_EXTENSIONS,
    CACHE_JSON_INDENT,
    CACHE_TEMP_PREFIX,
    CACHE_TEMP_SUFFIX,
    GRAPH_EXTENSION,
)
from caravan.exceptions import CacheFormatError, RelocationFilesystemError
from caravan.io import load_json_file, write_json_atomic
from caravan.relocation.buildinfo import relocate_build_info
from caravan.relocation.graph import relocate_graph
from caravan.relocation.rewriter import UriRewriter

logger = logging.getLogger(__name__)


@dataclass
class RelocationResult:
    """What a single ``move_cache_files`` pass changed on disk."""

    patched_files: list[Path] = field(default_factory=list)
    moved_entries: list[Path] = field(default_factory=list)
    removed_dirs: list[Path] = field(default_factory=list)


def move_cache_files(
    gen_file_dir: Path,
    old_root: str,
    new_root: str,
    source_files: set[str] | None = None,
) -> RelocationResult:
    """Relocate every cache document under ``gen_file_dir`` from ``old_root`` to ``new_root``.

    The toolchain mirrors absolute source paths below ``gen_file_dir``, so
    artifacts for ``/a/b/x`` live in ``gen_file_dir/a/b/x``. After patching the
    documents, the artifacts under the old root are moved below the new root and
    directories left empty are pruned.
    """
    result = RelocationResult()
    rewriter = UriRewriter.for_roots(old_root, new_root, source_files)

    for path in iter_cache_files(gen_file_dir):
        if relocate_cache_file(path, rewriter):
            result.patched_files.append(path)
            logger.info("Patched %s", _display_path(path, gen_file_dir))

    old_dir = mirrored_dir(gen_file_dir, old_root)
    new_dir = mirrored_dir(gen_file_dir, new_root)
    if old_dir == new_dir:
        return result

    try:
        children = sorted(old_dir.iterdir())
    except FileNotFoundError:
        logger.debug("No cached artifacts under %s", old_dir)
        return result
    except OSError as exc:
        raise RelocationFilesystemError(f"Unable to list {old_dir}: {exc}") from exc

    try:
        new_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RelocationFilesystemError(f"Unable to create {new_dir}: {exc}") from exc

    for child in children:
        if child == new_dir or child in new_dir.parents:
            continue
        target = new_dir / child.name
        _move_entry(child, target)
        result.moved_entries.append(target)

    result.removed_dirs = prune_empty_dirs(old_dir, stop_at=gen_file_dir)
    return result


def iter_cache_files(root: Path, extensions: tuple[str, ...] = CACHE_FILE_EXTENSIONS) -> Iterator[Path]:
    """Yield every file below ``root`` whose name ends with one of ``extensions``.

    Depth-first with an explicit stack. Each file is yielded exactly once;
    directory symlink cycles are not guarded against.
    """
    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            entries = sorted(directory.iterdir())
        except FileNotFoundError:
            continue
        except OSError as exc:
            raise RelocationFilesystemError(f"Unable to list {directory}: {exc}") from exc

        for entry in entries:
            if entry.is_dir():
                stack.append(entry)
            elif entry.name.endswith(extensions):
                yield entry


def relocate_cache_file(path: Path, rewriter: UriRewriter) -> bool:
    """Relocate one ``*.graph`` or ``*.buildinfo`` file; write it back only when changed."""
    try:
        document = load_json_file(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise RelocationFilesystemError(f"Unable to read {path}: {exc}") from exc
    except ValueError as exc:
        raise CacheFormatError(f"Invalid JSON in cache file {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise CacheFormatError(f"Cache file {path} must contain a JSON object")

    if path.name.endswith(GRAPH_EXTENSION):
        changed = relocate_graph(document, rewriter)  # type: ignore[arg-type]
    elif path.name.endswith(BUILDINFO_EXTENSION):
        changed = relocate_build_info(document, rewriter)  # type: ignore[arg-type]
    else:
        return False

    if not changed:
        return False

    try:
        write_json_atomic(
            path=path,
            payload=document,
            temp_prefix=CACHE_TEMP_PREFIX,
            temp_suffix=CACHE_TEMP_SUFFIX,
            indent=CACHE_JSON_INDENT,
            sort_keys=False,
        )
    except OSError as exc:
        raise RelocationFilesystemError(f"Unable to write {path}: {exc}") from exc
    return True


def prune_empty_dirs(start: Path, *, stop_at: Path | None = None) -> list[Path]:
    """Remove ``start`` and then each parent while they are empty.

    Walks upward one level at a time, re-checking emptiness, and stops at the
    first non-empty ancestor, at ``stop_at`` (which is kept), or at a directory
    that is already gone. Returns the removed directories in removal order.
    """
    removed: list[Path] = []
    current = start
    while current != stop_at:
        try:
            if any(current.iterdir()):
                break
            current.rmdir()
        except FileNotFoundError:
            break
        except OSError as exc:
            raise RelocationFilesystemError(f"Unable to remove {current}: {exc}") from exc

        removed.append(current)
        parent = current.parent
        if parent == current:
            break
        current = parent
    return removed


def mirrored_dir(gen_file_dir: Path, absolute_root: str) -> Path:
    """Return the directory mirroring ``absolute_root`` inside the cache."""
    return gen_file_dir / absolute_root.lstrip("/")


def _move_entry(source: Path, target: Path) -> None:
    """Rename ``source`` to ``target``, copying across filesystems when rename cannot."""
    try:
        os.replace(source, target)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise RelocationFilesystemError(f"Unable to move {source} to {target}: {exc}") from exc
        try:
            shutil.move(source, target)
        except OSError as move_exc:
            raise RelocationFilesystemError(f"Unable to move {source} to {target}: {move_exc}") from move_exc


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
