from .loader import config_from_payload, config_to_payload, load_table_config
from .schema import DEFAULT_TABLE_CONFIG, TABLE_CONFIG_SCHEMA, merge_with_defaults

__all__ = [
    "DEFAULT_TABLE_CONFIG",
    "TABLE_CONFIG_SCHEMA",
    "config_from_payload",
    "config_to_payload",
    "load_table_config",
    "merge_with_defaults",
]
