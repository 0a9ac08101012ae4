"""Pure Python signal system — no Qt dependency.

``Signal`` carries engine notifications (rows changed, load state changed) to
renderers; ``ObservableProperty`` wraps a single value and announces changes.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Named observer list.

    Handlers are kept in an immutable tuple that is swapped on every
    connect/disconnect, so an emission iterates a stable snapshot even when a
    handler disconnects itself.  A failing handler is logged and skipped; the
    remaining handlers still run.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._handlers: tuple[Callable, ...] = ()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<Signal {self.name or '?'} handlers={len(self._handlers)}>"

    def connect(self, handler: Callable) -> Callable:
        """Subscribe *handler*; returns it so this can be used as a decorator."""
        with self._lock:
            if handler not in self._handlers:
                self._handlers = (*self._handlers, handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            if handler not in self._handlers:
                raise ValueError(f"{handler!r} is not connected to {self!r}")
            self._handlers = tuple(h for h in self._handlers if h != handler)

    def disconnect_all(self) -> None:
        with self._lock:
            self._handlers = ()

    def emit(self, *args: Any) -> int:
        """Call every handler with *args*; returns how many succeeded."""
        delivered = 0
        for handler in self._handlers:
            try:
                handler(*args)
            except Exception as exc:
                _logger.error("%s handler %r failed: %s", self.name or "signal", handler, exc)
            else:
                delivered += 1
        return delivered

    @property
    def handler_count(self) -> int:
        return len(self._handlers)


class ObservableProperty:
    """Single observable value.

    Assigning a value that compares unequal to the current one emits
    ``changed(new_value, old_value)``.
    """

    def __init__(self, initial_value: Any = None, name: str = "") -> None:
        self._value = initial_value
        self.changed = Signal(name)

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        old_value = self._value
        if new_value == old_value:
            return
        self._value = new_value
        self.changed.emit(new_value, old_value)
