#!/usr/bin/env python3
"""Keep caravan modules small enough to review in one sitting.

Counts non-blank, non-comment lines per module. Modules over the soft cap are
listed as warnings; modules over the hard cap fail the check. ``--strict``
turns soft-cap warnings into failures as well.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

REPO_ROOT: Path = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class SizeCap:
    label: str
    directory: Path
    soft: int
    hard: int


CAPS: tuple[SizeCap, ...] = (
    SizeCap("src", REPO_ROOT / "src" / "caravan", soft=300, hard=500),
    SizeCap("test", REPO_ROOT / "tests", soft=400, hard=700),
)


def count_loc(path: Path) -> int:
    return sum(
        1
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.strip().startswith("#")
    )


def check(cap: SizeCap) -> tuple[list[str], list[str]]:
    """Return (soft, hard) violation messages for every module under ``cap.directory``."""
    soft: list[str] = []
    hard: list[str] = []
    for path in sorted(cap.directory.rglob("*.py")):
        if path.name == "__init__.py":
            continue
        loc = count_loc(path)
        relative = path.relative_to(REPO_ROOT)
        if loc > cap.hard:
            hard.append(f"{cap.label} {relative}: {loc} LOC (hard cap {cap.hard})")
        elif loc > cap.soft:
            soft.append(f"{cap.label} {relative}: {loc} LOC (soft cap {cap.soft})")
    return soft, hard


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check caravan module sizes")
    parser.add_argument("--strict", action="store_true", help="Fail on soft-cap violations too")
    args = parser.parse_args(argv)

    soft: list[str] = []
    hard: list[str] = []
    for cap in CAPS:
        if cap.directory.exists():
            cap_soft, cap_hard = check(cap)
            soft.extend(cap_soft)
            hard.extend(cap_hard)

    for message in soft:
        print(f"WARNING: {message}")
    for message in hard:
        print(f"ERROR:   {message}")

    if hard or (args.strict and soft):
        print(f"\n{len(hard)} hard-cap and {len(soft)} soft-cap violation(s).")
        return 1
    print("All modules within size caps." if not soft else f"\n{len(soft)} soft-cap warning(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
