"""Order-preserving rewriting of ``file://`` URIs from one root to another."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from caravan.constants.cache import FILE_URI_SCHEME


@dataclass
class UriRewriter:
    """Rewrites URIs under ``old_uri`` to the same relative path under ``new_root``.

    Every relative path that gets rewritten is recorded in ``discovered`` when a
    set is supplied. The set is shared by all relocators of one build so the
    caller can package the referenced source files afterwards.

    None of the helpers insert, remove or reorder entries. List positions and
    map enumeration order are load-bearing for the compiler cache.
    """

    old_uri: str
    new_root: str
    discovered: set[str] | None = None

    @classmethod
    def for_roots(cls, old_root: str, new_root: str, discovered: set[str] | None = None) -> UriRewriter:
        """Build a rewriter from two absolute filesystem roots."""
        return cls(
            old_uri=f"{FILE_URI_SCHEME}{old_root.rstrip('/')}",
            new_root=new_root.rstrip("/"),
            discovered=discovered,
        )

    @property
    def prefix(self) -> str:
        return f"{self.old_uri}/"

    def rewrite(self, value: object) -> str | None:
        """Return the relocated URI for ``value``, or ``None`` when it is not under the old root."""
        if not isinstance(value, str) or not value.startswith(self.prefix):
            return None
        relative = value[len(self.prefix) :]
        if self.discovered is not None:
            self.discovered.add(relative)
        return f"{FILE_URI_SCHEME}{self.new_root}/{relative}"

    def rewrite_list(self, values: list[str]) -> bool:
        """Rewrite matching entries of ``values`` in place."""
        changed = False
        for index, value in enumerate(values):
            updated = self.rewrite(value)
            if updated is not None:
                values[index] = updated
                changed = True
        return changed

    def rekey(self, mapping: dict[str, Any]) -> bool:
        """Move entries with matching keys to their relocated key, in place.

        The old key is always removed, and each entry keeps its position.
        """
        changed = False
        entries: list[tuple[str, Any]] = []
        for key, value in mapping.items():
            updated = self.rewrite(key)
            if updated is not None:
                key = updated
                changed = True
            entries.append((key, value))

        if changed:
            mapping.clear()
            mapping.update(entries)
        return changed
