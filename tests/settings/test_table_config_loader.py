"""Tests for loading and validating table configuration files."""

import json

import pytest
from jsonschema import ValidationError

from lazytable.config import DEFAULT_ROW_HEIGHT, DEFAULT_VISIBLE_ROWS
from lazytable.domain.models import SortState
from lazytable.errors import ConfigError, ConfigLoadError, ConfigValidationError
from lazytable.settings import (
    DEFAULT_TABLE_CONFIG,
    config_from_payload,
    config_to_payload,
    load_table_config,
    merge_with_defaults,
)


def _write(tmp_path, payload, name="table.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
    return path


class TestMergeWithDefaults:
    def test_none_gives_defaults(self):
        merged = merge_with_defaults(None)

        assert merged == DEFAULT_TABLE_CONFIG
        assert merged is not DEFAULT_TABLE_CONFIG

    def test_sorter_is_merged_key_by_key(self):
        merged = merge_with_defaults({"filterObj": {"ColumnSorter": {"state": "asc"}}})

        assert merged["filterObj"]["ColumnSorter"] == {"column": None, "state": "asc"}
        assert merged["filterObj"]["ColumnFilters"] == [""] * 8
        assert DEFAULT_TABLE_CONFIG["filterObj"]["ColumnSorter"]["state"] == ""

    def test_unknown_top_level_keys_are_kept(self):
        assert merge_with_defaults({"theme": "dark"})["theme"] == "dark"

    @pytest.mark.parametrize(
        "payload",
        [
            {"rowHeight": 0},
            {"nrVisibleRows": "eight"},
            {"columnWidths": [100, -1]},
            {"filterObj": {"ColumnSorter": {"state": "up"}}},
            {"filterObj": {"ColumnFilters": [1]}},
            {"simulatedFetchDelay": -0.5},
        ],
    )
    def test_invalid_values_fail_validation(self, payload):
        with pytest.raises(ValidationError):
            merge_with_defaults(payload)


class TestLoadTableConfig:
    def test_defaults_without_path(self):
        config = load_table_config()

        assert config.row_height == DEFAULT_ROW_HEIGHT
        assert config.number_of_visible_rows == DEFAULT_VISIBLE_ROWS
        assert config.column_widths == [150, 560, 250, 150, 560, 250, 560, 540]
        assert config.filter.column_filters == [""] * 8
        assert config.filter.column_sorter.state is SortState.NONE

    def test_reads_file(self, tmp_path):
        path = _write(
            tmp_path,
            {
                "rowHeight": 40,
                "nrVisibleRows": 12,
                "filterObj": {
                    "ColumnFilters": ["", "anna"],
                    "ColumnSorter": {"column": 1, "state": "desc"},
                },
                "columnWidths": [80, 120],
                "simulatedFetchDelay": 0,
            },
        )

        config = load_table_config(path)

        assert config.row_height == 40
        assert config.number_of_visible_rows == 12
        assert config.filter.column_filters == ["", "anna"]
        assert config.filter.column_sorter.column == 1
        assert config.filter.column_sorter.state is SortState.DESC
        assert config.column_widths == [80, 120]
        assert config.simulated_fetch_delay == 0

    def test_round_trips_through_payload(self):
        config = config_from_payload({"rowHeight": 30, "columnWidths": [10, 20]})

        assert config_from_payload(config_to_payload(config)) == config

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigLoadError):
            load_table_config(tmp_path / "missing.json")

    def test_broken_json(self, tmp_path):
        with pytest.raises(ConfigLoadError):
            load_table_config(_write(tmp_path, "{not json"))

    def test_non_object_json(self, tmp_path):
        with pytest.raises(ConfigLoadError, match="JSON object"):
            load_table_config(_write(tmp_path, [1, 2, 3]))

    def test_validation_error_is_translated(self, tmp_path):
        path = _write(tmp_path, {"rowHeight": -5})

        with pytest.raises(ConfigValidationError) as excinfo:
            load_table_config(path)

        assert isinstance(excinfo.value, ConfigError)
        assert "-5" in str(excinfo.value)
