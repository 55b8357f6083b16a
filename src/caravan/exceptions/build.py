"""Build step and dev server exceptions."""

from __future__ import annotations

from caravan.exceptions.base import CaravanError


class BuildError(CaravanError):
    """Raised when the external builder exits unsuccessfully."""


class DevServerStartError(CaravanError):
    """Raised when the dev server exits before reporting its port."""

    def __init__(self, entrypoint: str, returncode: int | None, signal_name: str | None) -> None:
        self.entrypoint = entrypoint
        self.returncode = returncode
        self.signal_name = signal_name
        super().__init__(
            f'Failed to start dev server for "{entrypoint}" (code={returncode}, signal={signal_name})'
        )
