"""Relocation of toolchain caches between absolute roots."""

from .buildinfo import relocate_build_info
from .graph import relocate_graph
from .mover import RelocationResult, iter_cache_files, move_cache_files, prune_empty_dirs, relocate_cache_file
from .rewriter import UriRewriter

__all__ = [
    "RelocationResult",
    "UriRewriter",
    "iter_cache_files",
    "move_cache_files",
    "prune_empty_dirs",
    "relocate_build_info",
    "relocate_cache_file",
    "relocate_graph",
]
