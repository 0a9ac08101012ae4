"""Pure Python ViewModel layer (MVVM) — no Qt dependency."""

from sortgrid.gui.viewmodels.base import BaseViewModel
from sortgrid.gui.viewmodels.fetch_orchestrator import (
    FetchOrchestrator,
    LoadState,
    TableOptions,
)
from sortgrid.gui.viewmodels.signal import ObservableProperty, Signal

__all__ = [
    "BaseViewModel",
    "FetchOrchestrator",
    "LoadState",
    "ObservableProperty",
    "Signal",
    "TableOptions",
]
