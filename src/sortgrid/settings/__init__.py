from .loader import TableSettings, load_table_settings, parse_table_settings
from .schema import DEFAULT_TABLE_SETTINGS, TABLE_SCHEMA

__all__ = [
    "DEFAULT_TABLE_SETTINGS",
    "TABLE_SCHEMA",
    "TableSettings",
    "load_table_settings",
    "parse_table_settings",
]
