"""Sortable, incrementally loaded list engine for data grids."""

from sortgrid.domain.models import ColumnDescriptor, SortDirection, SortMode, SortState, ValueType
from sortgrid.gui.viewmodels.fetch_orchestrator import FetchOrchestrator, LoadState, TableOptions

__version__ = "0.1.0"

__all__ = [
    "ColumnDescriptor",
    "FetchOrchestrator",
    "LoadState",
    "SortDirection",
    "SortMode",
    "SortState",
    "TableOptions",
    "ValueType",
]
