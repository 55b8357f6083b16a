"""Shared type aliases for Caravan."""

from .cache import BuildInfo, DependencyGraph, FileInfo, Program
from .common import JsonObject, JsonScalar, JsonValue
from .manifest import FunctionsManifest, ManifestPage
from .runtime import ErrorEnvelope, WireRequest, WireResponse

__all__ = [
    "BuildInfo",
    "DependencyGraph",
    "ErrorEnvelope",
    "FileInfo",
    "FunctionsManifest",
    "JsonObject",
    "JsonScalar",
    "JsonValue",
    "ManifestPage",
    "Program",
    "WireRequest",
    "WireResponse",
]
