"""Shared exception hierarchy for Caravan."""

from __future__ import annotations

from .base import CaravanError
from .build import BuildError, DevServerStartError
from .config import ConfigError
from .relocation import CacheFormatError, RelocationError, RelocationFilesystemError
from .runtime import HandlerExecutionError, HandlerLoadError, InvocationError, ProtocolError, WireFormatError

__all__ = [
    "BuildError",
    "CacheFormatError",
    "CaravanError",
    "ConfigError",
    "DevServerStartError",
    "HandlerExecutionError",
    "HandlerLoadError",
    "InvocationError",
    "ProtocolError",
    "RelocationError",
    "RelocationFilesystemError",
    "WireFormatError",
]
