import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from sortgrid.errors import ConfigurationError, InvalidSortRequest
from sortgrid.events.bus import EventBus
from sortgrid.events.grid_events import DomainEvent


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorOccurredEvent(DomainEvent):
    error: Optional[BaseException] = None
    severity: ErrorSeverity = ErrorSeverity.ERROR
    context: dict = field(default_factory=dict)


def classify(error: BaseException) -> ErrorSeverity:
    """Default severity for *error* when the caller does not pick one."""
    if isinstance(error, InvalidSortRequest):
        return ErrorSeverity.INFO
    if isinstance(error, ConfigurationError):
        return ErrorSeverity.CRITICAL
    return ErrorSeverity.ERROR


UiCallback = Callable[[str, ErrorSeverity], None]


class ErrorHandler:
    """Report failures that reach the GUI edge.

    Adapters run engine coroutines on behalf of toolkit events and have no
    caller to raise to, so they pass failures here.  Each one is logged at its
    severity, published as ``ErrorOccurredEvent`` and, for ``ERROR`` and
    ``CRITICAL``, shown through the registered UI callback.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[UiCallback] = None

    def register_ui_callback(self, callback: Optional[UiCallback]):
        self._ui_callback = callback

    def handle(
        self,
        error: BaseException,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[dict] = None,
    ) -> ErrorOccurredEvent:
        severity = severity or classify(error)
        context = dict(context or {})
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", type(error).__name__, error, extra={"context": context})

        event = ErrorOccurredEvent(error=error, severity=severity, context=context, source=self._logger.name)
        self._events.publish(event)

        if self._ui_callback is not None and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(str(error), severity)
        return event
