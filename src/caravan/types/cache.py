"""Typed structures for toolchain cache documents."""

from __future__ import annotations

from typing import NotRequired, TypedDict


class DependencyGraph(TypedDict):
    """Contents of a ``*.graph`` file: resolved import URIs plus a content hash."""

    deps: list[str]
    version_hash: str


class FileInfo(TypedDict):
    """Per-file compiler metadata stored in ``fileInfos``."""

    version: str
    signature: str
    affectsGlobalScope: bool


Program = TypedDict(
    "Program",
    {
        "fileNames": NotRequired[list[str]],
        "fileInfos": dict[str, FileInfo],
        "referencedMap": dict[str, list[str]],
        "exportedModulesMap": dict[str, list[str]],
        "semanticDiagnosticsPerFile": NotRequired[list[str]],
    },
)


class BuildInfo(TypedDict):
    """Contents of a ``*.buildinfo`` file."""

    program: Program
    version: str
