"""Exceptions raised while relocating toolchain caches."""

from __future__ import annotations

from caravan.exceptions.base import CaravanError


class RelocationError(CaravanError):
    """Base class for cache relocation failures. Always fatal to the build step."""


class RelocationFilesystemError(RelocationError, OSError):
    """Raised when reading, writing or moving cache entries fails."""


class CacheFormatError(RelocationError, ValueError):
    """Raised when a cache file does not contain a JSON document."""
