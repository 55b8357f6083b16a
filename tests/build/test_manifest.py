"""Tests for functions-manifest merging."""

from __future__ import annotations

import json
from pathlib import Path

from caravan.build import FunctionConfig
from caravan.build.manifest import build_manifest_page, load_manifest, update_manifest


def test_page_includes_only_configured_limits() -> None:
    assert build_manifest_page("api/a.py", FunctionConfig()) == {"handler": "api/a.py", "runtime": "provided.al2"}
    assert build_manifest_page("api/a.py", FunctionConfig(memory=512, max_duration=5, regions=("sfo1",))) == {
        "handler": "api/a.py",
        "runtime": "provided.al2",
        "memory": 512,
        "maxDuration": 5,
        "regions": ["sfo1"],
    }


def test_update_manifest_merges_pages(tmp_path: Path) -> None:
    path = tmp_path / "functions-manifest.json"

    update_manifest(path, "api/a/index", {"handler": "api/a.py", "runtime": "provided.al2"})
    update_manifest(path, "api/b/index", {"handler": "api/b.py", "runtime": "provided.al2"})

    manifest = json.loads(path.read_text(encoding="utf-8"))
    assert manifest["version"] == 1
    assert sorted(manifest["pages"]) == ["api/a/index", "api/b/index"]


def test_unreadable_manifest_starts_fresh(tmp_path: Path, caplog) -> None:
    path = tmp_path / "functions-manifest.json"
    path.write_text("{broken", encoding="utf-8")

    manifest = load_manifest(path)

    assert manifest == {"version": 1, "pages": {}}
    assert "Ignoring unreadable manifest" in caplog.text
