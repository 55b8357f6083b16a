"""JSON read/write helpers with atomic persistence."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from caravan.types import JsonValue


def load_json_file(path: Path) -> JsonValue:
    """Load and parse JSON from disk."""
    return json.loads(path.read_text(encoding="utf-8"))


def write_json_atomic(
    *,
    path: Path,
    payload: object,
    temp_prefix: str,
    temp_suffix: str,
    indent: int = 2,
    sort_keys: bool = True,
) -> None:
    """Persist JSON atomically by writing to a temp file then renaming.

    Cache documents are written with ``sort_keys=False`` so that map
    enumeration order survives the rewrite.
    """
    content = json.dumps(payload, indent=indent, sort_keys=sort_keys) + "\n"
    write_text_atomic(path=path, content=content, temp_prefix=temp_prefix, temp_suffix=temp_suffix)


def write_text_atomic(
    *,
    path: Path,
    content: str,
    temp_prefix: str,
    temp_suffix: str,
    mode: int | None = None,
) -> None:
    """Persist text atomically, optionally applying a file mode before the rename."""
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=temp_prefix,
            suffix=temp_suffix,
            delete=False,
        ) as handle:
            temp_name = handle.name
            handle.write(content)
        if mode is not None:
            os.chmod(temp_name, mode)
    except Exception:
        if temp_name:
            with suppress(FileNotFoundError):
                Path(temp_name).unlink()
        raise

    assert temp_name is not None
    os.replace(temp_name, path)
