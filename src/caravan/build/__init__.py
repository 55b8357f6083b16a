"""Build step: run the builder, relocate caches, package function output."""

from .config import CaravanConfig, FunctionConfig, load_config
from .entrypoint import BuildResult, build_entrypoint, build_project, entrypoint_output_name
from .runtime_bundle import stage_runtime

__all__ = [
    "BuildResult",
    "CaravanConfig",
    "FunctionConfig",
    "build_entrypoint",
    "build_project",
    "entrypoint_output_name",
    "load_config",
    "stage_runtime",
]
