"""Relocation of compiler build-info (``*.buildinfo``) documents.

A build-info program holds three kinds of collections that reference files:

* ``fileInfos`` maps a file to its own metadata, so only keys are URIs.
* ``referencedMap`` and ``exportedModulesMap`` map a file to the files it
  references, so both keys and list entries are URIs.
* ``fileNames`` and ``semanticDiagnosticsPerFile`` are positional lists whose
  indices are referenced from other parts of the cache.

Each kind is relocated independently. Lists are only ever rewritten in place.
"""

from __future__ import annotations

from caravan.relocation.rewriter import UriRewriter
from caravan.types import BuildInfo

KEYED_MAPS: tuple[str, ...] = ("fileInfos",)
REFERENCE_MAPS: tuple[str, ...] = ("referencedMap", "exportedModulesMap")
POSITIONAL_LISTS: tuple[str, ...] = ("fileNames", "semanticDiagnosticsPerFile")


def relocate_build_info(build_info: BuildInfo, rewriter: UriRewriter) -> bool:
    """Rewrite every old-root reference in ``build_info`` in place; return True if any changed."""
    program = build_info.get("program")
    if not isinstance(program, dict):
        return False

    changed = False

    for name in KEYED_MAPS:
        mapping = program.get(name)
        if isinstance(mapping, dict):
            changed |= rewriter.rekey(mapping)

    for name in REFERENCE_MAPS:
        mapping = program.get(name)
        if isinstance(mapping, dict):
            changed |= _relocate_reference_map(mapping, rewriter)

    for name in POSITIONAL_LISTS:
        values = program.get(name)
        if isinstance(values, list):
            changed |= rewriter.rewrite_list(values)

    return changed


def _relocate_reference_map(mapping: dict[str, list[str]], rewriter: UriRewriter) -> bool:
    """Rewrite reference lists first, then the keys that own them."""
    changed = False
    for refs in mapping.values():
        if isinstance(refs, list):
            changed |= rewriter.rewrite_list(refs)
    changed |= rewriter.rekey(mapping)
    return changed
