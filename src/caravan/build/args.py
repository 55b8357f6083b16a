"""Normalization of the builder arguments declared for a function."""

from __future__ import annotations

import argparse
import os
from collections.abc import Iterator, Sequence
from pathlib import Path
from urllib.parse import urlsplit

from caravan.constants.build import DEFAULT_BUILDER_FLAGS, FLAG_ALIASES, PATH_FLAGS
from caravan.exceptions import ConfigError


def is_url(value: str) -> bool:
    """Return True for values such as ``https://host/x`` or ``file:///x``."""
    scheme = urlsplit(value).scheme
    return len(scheme) > 1 and "://" in value


def normalize_builder_args(
    args: Sequence[str],
    *,
    entrypoint_dir: Path,
    root: Path,
    source_files: set[str] | None = None,
) -> list[str]:
    """Return the builder argv for a function.

    Flags that accept file paths are written relative to the entrypoint, but
    the builder runs from the project root, so local paths are rewritten to be
    relative to ``root`` and recorded in ``source_files`` for packaging.
    Unrecognized arguments are passed through in their original order.
    """
    known, rest = _parse(args)
    for flag in PATH_FLAGS:
        value = known.get(flag)
        if value is None or is_url(value):
            continue
        relative = os.path.relpath(entrypoint_dir / value, root)
        known[flag] = Path(relative).as_posix()
        if source_files is not None:
            source_files.add(known[flag])

    return [*DEFAULT_BUILDER_FLAGS, *_to_argv(known), *rest]


def _parse(args: Sequence[str]) -> tuple[dict[str, str | None], list[str]]:
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False, exit_on_error=False)
    for flag in PATH_FLAGS:
        aliases = [alias for alias, target in FLAG_ALIASES.items() if target == flag]
        parser.add_argument(*aliases, flag, dest=flag)

    try:
        namespace, rest = parser.parse_known_args(list(args))
    except argparse.ArgumentError as exc:
        raise ConfigError(f"Invalid function args: {exc}") from exc

    known = {flag: getattr(namespace, flag) for flag in PATH_FLAGS}
    return known, [arg for arg in rest if arg not in DEFAULT_BUILDER_FLAGS]


def _to_argv(known: dict[str, str | None]) -> Iterator[str]:
    for flag, value in known.items():
        if value is not None:
            yield flag
            yield value
