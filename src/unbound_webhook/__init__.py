"""Unbound webhook provider for external-dns."""

__version__ = "0.1.0"
