"""File-level helpers for packaging build output."""

from __future__ import annotations

import shutil
from pathlib import Path


def copy_into(relative: str, *, source_root: Path, dest_root: Path) -> Path:
    """Copy ``source_root/relative`` to ``dest_root/relative``, creating parents."""
    dest = dest_root / relative
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source_root / relative, dest)
    return dest
