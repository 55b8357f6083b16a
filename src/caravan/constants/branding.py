"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "CARAVAN"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ CARAVAN",
    "     // portable caches for serverless functions",
)
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} build and runtime adapter"))
