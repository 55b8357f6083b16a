"""Shared pytest fixtures for toolchain cache documents."""

from __future__ import annotations

import copy
from typing import Any

import pytest


@pytest.fixture()
def graph() -> dict[str, Any]:
    """Return a dependency graph with local and remote deps."""
    return {
        "deps": [
            "file:///work/app/api/hello.ts",
            "https://deno.land/std@0.122.0/http/server.ts",
            "file:///work/app/lib/util.ts",
            "file:///work/application/other.ts",
        ],
        "version_hash": "3f1b9c",
    }


@pytest.fixture()
def build_info() -> dict[str, Any]:
    """Return a build-info document touching every relocated collection."""
    info = {"version": "1", "signature": "sig", "affectsGlobalScope": False}
    return {
        "program": {
            "fileNames": [
                "file:///work/app/api/hello.ts",
                "https://deno.land/std@0.122.0/http/server.ts",
                "file:///work/app/lib/util.ts",
            ],
            "fileInfos": {
                "file:///work/app/api/hello.ts": dict(info),
                "https://deno.land/std@0.122.0/http/server.ts": dict(info),
                "file:///work/app/lib/util.ts": dict(info, signature="util"),
            },
            "referencedMap": {
                "file:///work/app/api/hello.ts": [
                    "file:///work/app/lib/util.ts",
                    "https://deno.land/std@0.122.0/http/server.ts",
                ],
            },
            "exportedModulesMap": {
                "https://deno.land/std@0.122.0/http/server.ts": ["file:///work/app/lib/types.ts"],
            },
            "semanticDiagnosticsPerFile": [
                "https://deno.land/std@0.122.0/http/server.ts",
                "file:///work/app/lib/util.ts",
            ],
        },
        "version": "4.4.2",
    }


@pytest.fixture()
def remote_only_build_info(build_info: dict[str, Any]) -> dict[str, Any]:
    """Return a build-info document with no reference to the old root."""
    remote = "https://deno.land/std@0.122.0/http/server.ts"
    document = copy.deepcopy(build_info)
    program = document["program"]
    program["fileNames"] = [remote]
    program["fileInfos"] = {remote: program["fileInfos"][remote]}
    program["referencedMap"] = {remote: []}
    program["exportedModulesMap"] = {}
    program["semanticDiagnosticsPerFile"] = [remote]
    return document
