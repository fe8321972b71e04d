"""Tablut rule engine and alpha-beta search."""

__version__ = "0.1.0"
