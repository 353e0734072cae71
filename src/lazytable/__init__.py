"""Lazily loaded, virtualized table engine."""

__version__ = "0.1.0"
