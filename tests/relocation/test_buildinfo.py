"""Tests for build-info relocation across all of its collections."""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest

from caravan.relocation import UriRewriter, relocate_build_info

OLD_ROOT = "/work/app"
NEW_ROOT = "/var/task"
REMOTE = "https://deno.land/std@0.122.0/http/server.ts"


def _relocate(document: dict[str, Any], discovered: set[str] | None = None) -> bool:
    return relocate_build_info(document, UriRewriter.for_roots(OLD_ROOT, NEW_ROOT, discovered))


def test_file_infos_keys_are_moved(build_info: dict[str, Any]) -> None:
    _relocate(build_info)

    file_infos = build_info["program"]["fileInfos"]
    assert list(file_infos) == [
        "file:///var/task/api/hello.ts",
        REMOTE,
        "file:///var/task/lib/util.ts",
    ]
    assert file_infos["file:///var/task/lib/util.ts"]["signature"] == "util"


def test_reference_maps_rewrite_lists_and_keys(build_info: dict[str, Any]) -> None:
    _relocate(build_info)

    program = build_info["program"]
    assert program["referencedMap"] == {
        "file:///var/task/api/hello.ts": ["file:///var/task/lib/util.ts", REMOTE],
    }
    assert program["exportedModulesMap"] == {REMOTE: ["file:///var/task/lib/types.ts"]}


def test_positional_lists_keep_length_and_order(build_info: dict[str, Any]) -> None:
    _relocate(build_info)

    program = build_info["program"]
    assert program["fileNames"] == [
        "file:///var/task/api/hello.ts",
        REMOTE,
        "file:///var/task/lib/util.ts",
    ]
    assert program["semanticDiagnosticsPerFile"] == [REMOTE, "file:///var/task/lib/util.ts"]


@pytest.mark.parametrize("name", ["fileInfos", "referencedMap", "exportedModulesMap"])
def test_old_keys_never_coexist_with_new_keys(build_info: dict[str, Any], name: str) -> None:
    old_keys = set(build_info["program"][name])

    _relocate(build_info)

    new_keys = set(build_info["program"][name])
    for key in old_keys:
        if key.startswith(f"file://{OLD_ROOT}/"):
            assert key not in new_keys
            assert key.replace(OLD_ROOT, NEW_ROOT, 1) in new_keys
    assert not any(key.startswith(f"file://{OLD_ROOT}/") for key in new_keys)


def test_every_rewritten_path_is_discovered(build_info: dict[str, Any]) -> None:
    discovered: set[str] = set()

    _relocate(build_info, discovered)

    assert discovered == {"api/hello.ts", "lib/util.ts", "lib/types.ts"}


def test_optional_lists_may_be_absent(build_info: dict[str, Any]) -> None:
    del build_info["program"]["fileNames"]
    del build_info["program"]["semanticDiagnosticsPerFile"]

    assert _relocate(build_info) is True
    assert "fileNames" not in build_info["program"]


def test_document_without_old_root_is_unchanged(remote_only_build_info: dict[str, Any]) -> None:
    before = json.dumps(remote_only_build_info)

    changed = _relocate(remote_only_build_info)

    assert changed is False
    assert json.dumps(remote_only_build_info) == before


def test_round_trip_restores_original(build_info: dict[str, Any]) -> None:
    original = copy.deepcopy(build_info)

    _relocate(build_info)
    relocate_build_info(build_info, UriRewriter.for_roots(NEW_ROOT, OLD_ROOT))

    assert build_info == original
    for name in ("fileInfos", "referencedMap", "exportedModulesMap"):
        assert set(build_info["program"][name]) == set(original["program"][name])


def test_missing_program_is_not_an_error() -> None:
    assert relocate_build_info({"version": "x"}, UriRewriter.for_roots(OLD_ROOT, NEW_ROOT)) is False  # type: ignore[typeddict-item]
