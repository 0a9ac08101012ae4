"""BaseViewModel — pure Python, no Qt dependency.

Owns the ViewModel's outgoing signals so that ``dispose()`` releases every
connected handler in one call.
"""

from __future__ import annotations

from sortgrid.gui.viewmodels.signal import ObservableProperty, Signal


class BaseViewModel:
    """ViewModel base class — pure Python, no Qt dependency."""

    def __init__(self) -> None:
        self._signals: list[Signal] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def make_signal(self, name: str) -> Signal:
        """Create a signal whose handlers are dropped on ``dispose()``."""
        signal = Signal(name)
        self._signals.append(signal)
        return signal

    def make_property(self, initial_value, name: str) -> ObservableProperty:
        prop = ObservableProperty(initial_value, name)
        self._signals.append(prop.changed)
        return prop

    def dispose(self) -> None:
        """Disconnect every handler attached to this ViewModel's signals."""
        for signal in self._signals:
            signal.disconnect_all()
        self._disposed = True
