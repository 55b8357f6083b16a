"""Tests for the caravan command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from caravan.cli.main import build_parser, main


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["relocate", "--cache-dir", "cache", "--from", "/work/app"])

    assert args.command == "relocate"
    assert args.cache_dir == Path("cache")
    assert args.old_root == "/work/app"
    assert args.new_root == "/var/task"


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_relocate_command_moves_cache(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    gen = tmp_path / "gen"
    graph = gen / "work" / "app" / "api" / "hello.ts.graph"
    graph.parent.mkdir(parents=True)
    graph.write_text(json.dumps({"deps": ["file:///work/app/lib/util.ts"], "version_hash": "x"}), encoding="utf-8")

    code = main(["relocate", "--cache-dir", str(gen), "--from", "/work/app", "--to", "/srv/fn"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Patched 1 cache files, moved 1 entries" in out
    assert " - lib/util.ts" in out
    moved = gen / "srv" / "fn" / "api" / "hello.ts.graph"
    assert json.loads(moved.read_text(encoding="utf-8"))["deps"] == ["file:///srv/fn/lib/util.ts"]


def test_relocate_rejects_relative_roots(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["relocate", "--cache-dir", str(tmp_path), "--from", "work/app"])

    assert code == 2
    assert "must be an absolute path" in capsys.readouterr().err


def test_relocate_reports_corrupt_cache(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "bad.graph").write_text("{", encoding="utf-8")

    code = main(["relocate", "--cache-dir", str(tmp_path), "--from", "/work/app"])

    assert code == 1
    assert "Invalid JSON in cache file" in capsys.readouterr().err


def test_build_reports_config_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "caravan.yaml").write_text("execution_root: relative\n", encoding="utf-8")

    code = main(["build", "--root", str(tmp_path)])

    assert code == 2
    assert "Configuration error" in capsys.readouterr().err


def test_build_without_entrypoints(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["build", "--root", str(tmp_path)])

    assert code == 0
    assert "No entrypoints matched." in capsys.readouterr().out
