"""Functions manifest merging."""

from __future__ import annotations

import logging
from pathlib import Path

from caravan.build.config import FunctionConfig
from caravan.constants.build import (
    MANIFEST_RUNTIME,
    MANIFEST_TEMP_PREFIX,
    MANIFEST_TEMP_SUFFIX,
    MANIFEST_VERSION,
)
from caravan.io import load_json_file, write_json_atomic
from caravan.types import FunctionsManifest, ManifestPage

logger = logging.getLogger(__name__)


def build_manifest_page(entrypoint: str, function: FunctionConfig) -> ManifestPage:
    """Describe one built entrypoint for the manifest."""
    page: ManifestPage = {"handler": entrypoint, "runtime": MANIFEST_RUNTIME}
    if function.memory is not None:
        page["memory"] = function.memory
    if function.max_duration is not None:
        page["maxDuration"] = function.max_duration
    if function.regions is not None:
        page["regions"] = list(function.regions)
    return page


def load_manifest(path: Path) -> FunctionsManifest:
    """Load an existing manifest, starting fresh when it is missing or unreadable."""
    try:
        payload = load_json_file(path)
    except FileNotFoundError:
        payload = {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable manifest %s: %s", path, exc)
        payload = {}

    if not isinstance(payload, dict):
        payload = {}
    pages = payload.get("pages")
    return {
        "version": payload.get("version") or MANIFEST_VERSION,
        "pages": pages if isinstance(pages, dict) else {},
    }


def update_manifest(path: Path, output_name: str, page: ManifestPage) -> FunctionsManifest:
    """Merge ``page`` under ``output_name`` into the manifest at ``path``."""
    manifest = load_manifest(path)
    manifest["pages"][output_name] = page
    write_json_atomic(
        path=path,
        payload=manifest,
        temp_prefix=MANIFEST_TEMP_PREFIX,
        temp_suffix=MANIFEST_TEMP_SUFFIX,
    )
    return manifest
