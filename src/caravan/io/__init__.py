"""Shared file I/O helpers."""

from .files import copy_into
from .json_io import load_json_file, write_json_atomic, write_text_atomic

__all__ = ["copy_into", "load_json_file", "write_json_atomic", "write_text_atomic"]
