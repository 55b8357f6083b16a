"""Tests for dependency-graph relocation."""

from __future__ import annotations

import copy
from typing import Any

from caravan.relocation import UriRewriter, relocate_graph


def test_relocate_graph_rewrites_matching_deps_in_order(graph: dict[str, Any]) -> None:
    discovered: set[str] = set()
    rewriter = UriRewriter.for_roots("/work/app", "/var/task", discovered)

    changed = relocate_graph(graph, rewriter)

    assert changed is True
    assert graph["deps"] == [
        "file:///var/task/api/hello.ts",
        "https://deno.land/std@0.122.0/http/server.ts",
        "file:///var/task/lib/util.ts",
        "file:///work/application/other.ts",
    ]
    assert graph["version_hash"] == "3f1b9c"
    assert discovered == {"api/hello.ts", "lib/util.ts"}


def test_relocate_graph_without_local_deps_is_a_no_op(graph: dict[str, Any]) -> None:
    graph["deps"] = ["https://deno.land/std@0.122.0/http/server.ts"]
    original = copy.deepcopy(graph)

    changed = relocate_graph(graph, UriRewriter.for_roots("/work/app", "/var/task"))

    assert changed is False
    assert graph == original


def test_relocate_graph_tolerates_missing_deps() -> None:
    assert relocate_graph({"version_hash": "x"}, UriRewriter.for_roots("/a", "/b")) is False  # type: ignore[typeddict-item]


def test_relocate_graph_round_trip_restores_original(graph: dict[str, Any]) -> None:
    original = list(graph["deps"])

    relocate_graph(graph, UriRewriter.for_roots("/work/app", "/var/task"))
    relocate_graph(graph, UriRewriter.for_roots("/var/task", "/work/app"))

    assert graph["deps"] == original
