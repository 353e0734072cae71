"""Custom exception hierarchy for lazytable."""

from __future__ import annotations


class LazyTableError(Exception):
    """Base class for all custom errors raised by lazytable."""


# --- Data service errors ---

class DataServiceError(LazyTableError):
    """Raised when a data service cannot answer a batch or row request."""


class RowNotFoundError(DataServiceError):
    """Raised when a requested row index lies outside the filtered dataset."""


# --- Configuration errors ---

class ConfigError(LazyTableError):
    """Base class for configuration related failures."""


class ConfigLoadError(ConfigError):
    """Raised when a configuration file cannot be read or parsed."""


class ConfigValidationError(ConfigError):
    """Raised when configuration data fails schema validation."""


__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DataServiceError",
    "LazyTableError",
    "RowNotFoundError",
]
