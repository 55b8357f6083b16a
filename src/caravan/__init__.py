"""Relocatable build caches and a custom runtime loop for serverless functions."""

__version__ = "0.4.0"
