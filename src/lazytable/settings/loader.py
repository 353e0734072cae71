"""Load :class:`TableConfig` objects from JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..domain.models import Filter, TableConfig
from ..errors import ConfigLoadError, ConfigValidationError
from .schema import merge_with_defaults

LOGGER = logging.getLogger(__name__)


def read_config_payload(path: Path) -> dict[str, Any]:
    """Return the raw JSON object stored at *path*."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigLoadError(f"Cannot read table config {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigLoadError(f"Table config {path} must contain a JSON object")
    return payload


def config_from_payload(payload: dict[str, Any] | None) -> TableConfig:
    """Validate *payload* (merged with defaults) and build a :class:`TableConfig`."""

    try:
        data = merge_with_defaults(payload)
    except ValidationError as exc:
        raise ConfigValidationError(exc.message) from exc
    return TableConfig(
        row_height=data["rowHeight"],
        number_of_visible_rows=data["nrVisibleRows"],
        filter=Filter.from_dict(data["filterObj"]),
        column_widths=list(data["columnWidths"]),
        simulated_fetch_delay=data["simulatedFetchDelay"],
    )


def config_to_payload(config: TableConfig) -> dict[str, Any]:
    """Return the JSON form of *config*."""

    return {
        "rowHeight": config.row_height,
        "nrVisibleRows": config.number_of_visible_rows,
        "filterObj": config.filter.to_dict(),
        "columnWidths": list(config.column_widths),
        "simulatedFetchDelay": config.simulated_fetch_delay,
    }


def load_table_config(path: Path | None = None) -> TableConfig:
    """Load the table configuration at *path*, or the defaults when ``None``."""

    if path is None:
        return config_from_payload(None)
    LOGGER.debug("Loading table config from %s", path)
    return config_from_payload(read_config_payload(path))


__all__ = ["config_from_payload", "config_to_payload", "load_table_config", "read_config_payload"]
