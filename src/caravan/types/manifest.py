"""Typed structures for the functions manifest."""

from __future__ import annotations

from typing import NotRequired, TypedDict


class ManifestPage(TypedDict):
    """Manifest entry for one built entrypoint."""

    handler: str
    runtime: str
    memory: NotRequired[int]
    maxDuration: NotRequired[int]
    regions: NotRequired[list[str]]


class FunctionsManifest(TypedDict):
    """Top-level ``functions-manifest.json`` payload."""

    version: int
    pages: dict[str, ManifestPage]
