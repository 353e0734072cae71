"""Schema helpers for table configuration files."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_ROW_HEIGHT,
    DEFAULT_SIMULATED_FETCH_DELAY,
    DEFAULT_VISIBLE_ROWS,
    DEMO_COLUMN_WIDTHS,
)

TABLE_CONFIG_SCHEMA: dict[str, Any] = {
    "$id": "lazytable/table-config.schema.json",
    "type": "object",
    "required": ["rowHeight", "nrVisibleRows", "filterObj", "columnWidths"],
    "properties": {
        "rowHeight": {"type": "integer", "minimum": 1},
        "nrVisibleRows": {"type": "integer", "minimum": 1},
        "filterObj": {
            "type": "object",
            "required": ["ColumnFilters", "ColumnSorter"],
            "properties": {
                "ColumnFilters": {
                    "type": "array",
                    "items": {"type": "string"},
                },
                "ColumnSorter": {
                    "type": "object",
                    "properties": {
                        "column": {"type": ["integer", "null"], "minimum": 0},
                        "state": {"enum": ["asc", "desc", ""]},
                    },
                    "additionalProperties": False,
                },
            },
            "additionalProperties": False,
        },
        "columnWidths": {
            "type": "array",
            "items": {"type": "number", "minimum": 0},
        },
        "simulatedFetchDelay": {"type": "number", "minimum": 0},
    },
    "additionalProperties": True,
}

DEFAULT_TABLE_CONFIG: dict[str, Any] = {
    "rowHeight": DEFAULT_ROW_HEIGHT,
    "nrVisibleRows": DEFAULT_VISIBLE_ROWS,
    "filterObj": {
        "ColumnFilters": [""] * len(DEMO_COLUMN_WIDTHS),
        "ColumnSorter": {"column": None, "state": ""},
    },
    "columnWidths": list(DEMO_COLUMN_WIDTHS),
    "simulatedFetchDelay": DEFAULT_SIMULATED_FETCH_DELAY,
}

_validator = Draft202012Validator(TABLE_CONFIG_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_TABLE_CONFIG` and validate the result."""

    merged = deepcopy(DEFAULT_TABLE_CONFIG)
    if data:
        for key, value in data.items():
            if key == "filterObj" and isinstance(value, dict):
                target = merged["filterObj"]
                for sub_key, sub_value in value.items():
                    if sub_key == "ColumnSorter" and isinstance(sub_value, dict):
                        target["ColumnSorter"].update(sub_value)
                        continue
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


__all__ = [
    "DEFAULT_TABLE_CONFIG",
    "TABLE_CONFIG_SCHEMA",
    "merge_with_defaults",
]
