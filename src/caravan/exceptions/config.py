"""Configuration-related exceptions."""

from __future__ import annotations

from caravan.exceptions.base import CaravanError


class ConfigError(CaravanError, ValueError):
    """Raised when ``caravan.yaml`` or a function config is invalid."""
