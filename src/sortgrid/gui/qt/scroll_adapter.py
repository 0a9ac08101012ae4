"""Qt adapter that drives ``ScrollTrigger`` from a vertical scroll bar."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Coroutine, Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QScrollBar

from sortgrid.errors.handler import ErrorHandler, ErrorSeverity
from sortgrid.gui.scroll_trigger import ScrollTrigger

Scheduler = Callable[[Coroutine[Any, Any, Any]], Awaitable[Any]]


class QtScrollTriggerAdapter(QObject):
    """Watch a ``QScrollBar`` and report the list geometry to a trigger.

    Scroll bar values are content coordinates: the viewport covers
    ``[value, value + pageStep)`` and the content ends at
    ``maximum + pageStep``.  Each report is scheduled on the asyncio loop via
    *scheduler* (``asyncio.ensure_future`` by default, which needs a running
    loop such as the one ``PySide6.QtAsyncio`` provides).  While a report is
    still pending, further scroll events are dropped.
    """

    loadFailed = Signal(str)

    def __init__(
        self,
        trigger: ScrollTrigger,
        scroll_bar: QScrollBar,
        error_handler: Optional[ErrorHandler] = None,
        scheduler: Optional[Scheduler] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._trigger = trigger
        self._scroll_bar = scroll_bar
        self._error_handler = error_handler
        self._scheduler = scheduler or asyncio.ensure_future
        self._pending: Optional[Awaitable[Any]] = None
        self._connected = False
        self._logger = logging.getLogger(__name__)

    def connect_controls(self) -> None:
        """Start listening to the scroll bar."""
        if self._connected:
            return
        self._scroll_bar.valueChanged.connect(self._handle_value_changed)
        self._scroll_bar.rangeChanged.connect(self._handle_range_changed)
        self._connected = True

    def disconnect_controls(self) -> None:
        """Stop listening to the scroll bar."""
        if not self._connected:
            return
        try:
            self._scroll_bar.valueChanged.disconnect(self._handle_value_changed)
            self._scroll_bar.rangeChanged.disconnect(self._handle_range_changed)
        finally:
            self._connected = False

    def geometry(self) -> tuple[int, int]:
        """Return ``(content_bottom, viewport_bottom)`` in content pixels."""
        page = self._scroll_bar.pageStep()
        return self._scroll_bar.maximum() + page, self._scroll_bar.value() + page

    def check(self) -> bool:
        """Report the current geometry; returns ``False`` if one is pending."""
        if self._pending is not None and not self._pending.done():
            return False
        content_bottom, viewport_bottom = self.geometry()
        pending = self._scheduler(self._trigger.notify(content_bottom, viewport_bottom))
        self._pending = pending
        if hasattr(pending, "add_done_callback"):
            pending.add_done_callback(self._handle_done)
        return True

    def _handle_value_changed(self, _value: int) -> None:
        self.check()

    def _handle_range_changed(self, _minimum: int, _maximum: int) -> None:
        self.check()

    def _handle_done(self, future: "asyncio.Future[Any]") -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        if self._error_handler is not None:
            self._error_handler.handle(
                exc,
                ErrorSeverity.ERROR,
                context={"operation": "load_next_page"},
            )
        else:
            self._logger.error("Scroll-triggered load failed: %s", exc)
        self.loadFailed.emit(str(exc))
