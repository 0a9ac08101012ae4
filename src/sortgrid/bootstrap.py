"""Wire a table engine together from its settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import httpx

from sortgrid.application.interfaces import IRowDataSource, Record
from sortgrid.domain.models.sort import SortMode
from sortgrid.domain.services.comparators import ComparatorRegistry
from sortgrid.errors import ConfigurationError
from sortgrid.errors.handler import ErrorHandler
from sortgrid.events.bus import EventBus
from sortgrid.gui.scroll_trigger import ScrollTrigger
from sortgrid.gui.viewmodels.fetch_orchestrator import FetchOrchestrator
from sortgrid.infrastructure.http_data_source import HttpRowDataSource
from sortgrid.settings.loader import TableSettings


def _create_event_bus() -> EventBus:
    return EventBus(logging.getLogger("sortgrid.events"))


@dataclass
class TableContext:
    """Everything one table needs, owned together and torn down together."""

    orchestrator: FetchOrchestrator
    scroll_trigger: ScrollTrigger
    event_bus: EventBus
    error_handler: ErrorHandler
    data_source: Optional[IRowDataSource] = None
    _owns_source: bool = field(default=False, repr=False)

    async def aclose(self) -> None:
        """Dispose the engine and close a data source created for it."""
        self.orchestrator.dispose()
        if self._owns_source and self.data_source is not None:
            await self.data_source.aclose()


def build_table(
    settings: TableSettings,
    *,
    records: Iterable[Record] = (),
    data_source: Optional[IRowDataSource] = None,
    client: Optional[httpx.AsyncClient] = None,
    event_bus: Optional[EventBus] = None,
) -> TableContext:
    """Create the engine, scroll trigger and error handler for *settings*.

    Server tables without an explicit *data_source* get an
    :class:`HttpRowDataSource` for ``settings.url``.
    """
    bus = event_bus or _create_event_bus()
    owns_source = False
    if settings.options.mode is SortMode.SERVER and data_source is None:
        if not settings.url:
            raise ConfigurationError("Server sort mode needs a 'url' or an explicit data source")
        data_source = HttpRowDataSource(settings.url, client=client)
        owns_source = True

    comparators = ComparatorRegistry.default(settings.locales, settings.case_first)
    orchestrator = FetchOrchestrator(
        settings.columns,
        settings.options,
        data_source=data_source if settings.options.mode is SortMode.SERVER else None,
        records=records,
        comparators=comparators,
        event_bus=bus,
    )
    return TableContext(
        orchestrator=orchestrator,
        scroll_trigger=ScrollTrigger(orchestrator),
        event_bus=bus,
        error_handler=ErrorHandler(logging.getLogger("sortgrid.errors"), bus),
        data_source=data_source,
        _owns_source=owns_source,
    )
