"""Qt adapter that turns header clicks into sort toggles."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QHeaderView

from sortgrid.errors.handler import ErrorHandler
from sortgrid.gui.qt.scroll_adapter import Scheduler
from sortgrid.gui.viewmodels.fetch_orchestrator import FetchOrchestrator


class QtHeaderSortAdapter(QObject):
    """Map ``QHeaderView.sectionClicked`` to ``FetchOrchestrator.apply_sort``.

    Section *n* corresponds to the orchestrator's *n*-th column.  Clicking a
    non-sortable column is ignored by the orchestrator itself.
    """

    sortRequested = Signal(str)

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        header: QHeaderView,
        error_handler: Optional[ErrorHandler] = None,
        scheduler: Optional[Scheduler] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._orchestrator = orchestrator
        self._header = header
        self._error_handler = error_handler
        self._scheduler = scheduler or asyncio.ensure_future
        self._connected = False
        self._logger = logging.getLogger(__name__)

    def connect_controls(self) -> None:
        if self._connected:
            return
        self._header.sectionClicked.connect(self.handle_section_clicked)
        self._connected = True

    def disconnect_controls(self) -> None:
        if not self._connected:
            return
        try:
            self._header.sectionClicked.disconnect(self.handle_section_clicked)
        finally:
            self._connected = False

    def handle_section_clicked(self, section: int) -> None:
        columns = self._orchestrator.columns
        if not 0 <= section < len(columns):
            return
        column_id = columns[section].id
        self.sortRequested.emit(column_id)
        pending = self._scheduler(self._orchestrator.apply_sort(column_id))
        if hasattr(pending, "add_done_callback"):
            pending.add_done_callback(self._handle_done)

    def _handle_done(self, future: "asyncio.Future[object]") -> None:
        if future.cancelled() or future.exception() is None:
            return
        exc = future.exception()
        if self._error_handler is not None:
            self._error_handler.handle(exc, context={"operation": "apply_sort"})
        else:
            self._logger.error("Sort request failed: %s", exc)
