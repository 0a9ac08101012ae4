from .column import ColumnDescriptor, ValueType, columns_from_config, index_columns
from .query import RowQuery
from .sort import SortDirection, SortMode, SortState

__all__ = [
    "ColumnDescriptor",
    "RowQuery",
    "SortDirection",
    "SortMode",
    "SortState",
    "ValueType",
    "columns_from_config",
    "index_columns",
]
