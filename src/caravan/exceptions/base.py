"""Root of the Caravan exception hierarchy."""

from __future__ import annotations


class CaravanError(Exception):
    """Base class for all errors raised by Caravan."""
