"""Relocation of dependency-graph (``*.graph``) documents."""

from __future__ import annotations

from caravan.relocation.rewriter import UriRewriter
from caravan.types import DependencyGraph


def relocate_graph(graph: DependencyGraph, rewriter: UriRewriter) -> bool:
    """Rewrite ``deps`` entries under the old root in place; return True if any changed."""
    deps = graph.get("deps")
    if not isinstance(deps, list):
        return False
    return rewriter.rewrite_list(deps)
