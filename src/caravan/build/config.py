"""Loading and validation of ``caravan.yaml``."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from caravan.constants.build import (
    CONFIG_FILENAME,
    DEFAULT_ENTRYPOINT_GLOBS,
    DEFAULT_EXECUTION_ROOT,
    DEFAULT_TOOLCHAIN_VERSION,
)
from caravan.constants.config_schema import CONFIG_SCHEMA
from caravan.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionConfig:
    """Per-entrypoint build and deployment settings."""

    version: str = DEFAULT_TOOLCHAIN_VERSION
    args: tuple[str, ...] = ()
    include_files: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    memory: int | None = None
    max_duration: int | None = None
    regions: tuple[str, ...] | None = None

    @property
    def toolchain_version(self) -> str:
        """Toolchain version with the ``v`` prefix the builder expects."""
        return self.version if self.version.startswith("v") else f"v{self.version}"


@dataclass(frozen=True)
class CaravanConfig:
    """Resolved project config."""

    entrypoints: tuple[str, ...] = DEFAULT_ENTRYPOINT_GLOBS
    builder: tuple[str, ...] = ()
    execution_root: str = DEFAULT_EXECUTION_ROOT
    functions: Mapping[str, FunctionConfig] = field(default_factory=dict)

    def function_for(self, entrypoint: str) -> FunctionConfig:
        """Return the settings for ``entrypoint``, falling back to defaults."""
        return self.functions.get(entrypoint) or FunctionConfig()


def load_config(root: Path, config_path: Path | None = None) -> CaravanConfig:
    """Load and validate ``caravan.yaml`` from ``root`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return CaravanConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    validate_config_data(raw, path)

    functions = {
        entrypoint: _build_function_config(settings or {})
        for entrypoint, settings in (raw.get("functions") or {}).items()
    }
    return CaravanConfig(
        entrypoints=tuple(raw.get("entrypoints", DEFAULT_ENTRYPOINT_GLOBS)),
        builder=tuple(raw.get("builder", ())),
        execution_root=raw.get("execution_root", DEFAULT_EXECUTION_ROOT).rstrip("/") or "/",
        functions=functions,
    )


def validate_config_data(raw: dict[str, Any], path: Path) -> None:
    """Raise ``ConfigError`` listing every schema violation in ``raw``."""
    validator = jsonschema.Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(raw), key=lambda error: list(error.absolute_path))
    if not errors:
        return

    lines = [f"{_format_location(error)}: {error.message}" for error in errors]
    raise ConfigError(f"Invalid config file at {path}:\n" + "\n".join(lines))


def _build_function_config(raw: dict[str, Any]) -> FunctionConfig:
    include_files = raw.get("includeFiles", ())
    if isinstance(include_files, str):
        include_files = (include_files,)

    regions = raw.get("regions")
    return FunctionConfig(
        version=raw.get("version", DEFAULT_TOOLCHAIN_VERSION),
        args=tuple(raw.get("args", ())),
        include_files=tuple(include_files),
        env=dict(raw.get("env", {})),
        memory=raw.get("memory"),
        max_duration=raw.get("maxDuration"),
        regions=tuple(regions) if regions is not None else None,
    )


def _format_location(error: jsonschema.ValidationError) -> str:
    parts = [str(part) for part in error.absolute_path]
    return ".".join(parts) if parts else "<root>"
