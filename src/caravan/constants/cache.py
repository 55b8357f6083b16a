"""Constants for toolchain cache files and their relocation."""

from __future__ import annotations

GRAPH_EXTENSION: str = ".graph"
BUILDINFO_EXTENSION: str = ".buildinfo"
CACHE_FILE_EXTENSIONS: tuple[str, ...] = (GRAPH_EXTENSION, BUILDINFO_EXTENSION)

FILE_URI_SCHEME: str = "file://"

# Location of per-file compiler output inside the toolchain cache directory.
GEN_FILE_SUBDIR: str = "gen/file"

CACHE_TEMP_PREFIX: str = ".relocate-"
CACHE_TEMP_SUFFIX: str = ".tmp"
CACHE_JSON_INDENT: int = 2
