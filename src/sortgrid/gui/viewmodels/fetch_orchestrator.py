"""FetchOrchestrator: the sortable, incrementally loaded list engine.

Pure Python, no Qt dependency.  The orchestrator owns the sort state, the page
cursor and the row store of one table.  Renderers observe it through signals
and adapters drive it through plain coroutine methods:

* :meth:`FetchOrchestrator.apply_sort`: header clicks / programmatic sorts;
* :meth:`FetchOrchestrator.load_next_page`: explicit page requests;
* :meth:`FetchOrchestrator.on_scroll_proximity`: scroll triggers.

In ``SortMode.CLIENT`` the full dataset is resident and sorting reorders it in
memory.  In ``SortMode.SERVER`` rows are fetched page by page from an
:class:`~sortgrid.application.interfaces.IRowDataSource` and every sort change
restarts pagination from offset zero.

All state changes happen on the event loop that awaits the data source.  Each
pagination restart bumps a generation counter; a page that resolves after its
generation was superseded is discarded instead of being appended to the new
window.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from sortgrid.application.interfaces import IRowDataSource, IRowsRenderer, Record
from sortgrid.application.services.data_store import DataStore
from sortgrid.application.services.page_cursor import PageCursor
from sortgrid.config import DEFAULT_PAGE_SIZE
from sortgrid.domain.models.column import ColumnDescriptor, index_columns
from sortgrid.domain.models.query import RowQuery
from sortgrid.domain.models.sort import SortDirection, SortMode, SortState
from sortgrid.domain.services.comparators import ComparatorRegistry
from sortgrid.errors import ConfigurationError, InvalidSortRequest
from sortgrid.events.bus import EventBus
from sortgrid.events.grid_events import (
    PageLoadedEvent,
    SortAppliedEvent,
    StalePageDiscardedEvent,
)
from sortgrid.gui.viewmodels.base import BaseViewModel


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    EMPTY = "empty"


@dataclass(frozen=True)
class TableOptions:
    """Construction options of a table engine."""

    mode: SortMode = SortMode.SERVER
    page_size: int = DEFAULT_PAGE_SIZE
    initial_sort: Optional[SortState] = None
    params: Mapping[str, Any] = field(default_factory=dict)


class FetchOrchestrator(BaseViewModel):
    """Sort, page and store the rows of one table.

    Signals:

    * ``rows_changed(rows)``: full ordered row tuple after every change;
    * ``load_state_changed(state)``: :class:`LoadState` transitions;
    * ``sort_changed(new_state, old_state)``: the active sort changed;
    * ``error_occurred(exc)``: a data source failure, also re-raised to the
      awaiting caller.
    """

    def __init__(
        self,
        columns: Iterable[ColumnDescriptor],
        options: Optional[TableOptions] = None,
        data_source: Optional[IRowDataSource] = None,
        records: Iterable[Record] = (),
        comparators: Optional[ComparatorRegistry] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        options = options or TableOptions()

        self._column_order: tuple[ColumnDescriptor, ...] = tuple(columns)
        self._columns = index_columns(self._column_order)
        self._comparators = comparators or ComparatorRegistry.default()
        self._comparators.validate(self._column_order)

        try:
            self._mode = SortMode(options.mode)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown sort mode: {options.mode!r}") from exc
        self._cursor = PageCursor(options.page_size)

        records = list(records)
        if self._mode is SortMode.SERVER:
            if data_source is None:
                raise ConfigurationError("Server sort mode requires a data source")
            if records:
                raise ConfigurationError("Initial records are only supported in client sort mode")
        self._data_source = data_source
        self._store = DataStore(records)
        self._event_bus = event_bus
        self._params: dict[str, Any] = dict(options.params)

        self._sort = self.make_property(SortState(), "sort_state")
        self._initial_sort = options.initial_sort
        self._loading = False
        # Client data is resident from the start, which counts as a completed load.
        self._completed_loads = 1 if self._mode is SortMode.CLIENT else 0
        self._generation = 0
        self._last_load_state = self.load_state

        self.rows_changed = self.make_signal("rows_changed")
        self.load_state_changed = self.make_signal("load_state_changed")
        self.sort_changed = self._sort.changed
        self.error_occurred = self.make_signal("error_occurred")

    # -- properties --------------------------------------------------------

    @property
    def columns(self) -> tuple[ColumnDescriptor, ...]:
        return self._column_order

    @property
    def mode(self) -> SortMode:
        return self._mode

    @property
    def sort_state(self) -> SortState:
        return self._sort.value

    @property
    def rows(self) -> tuple[Record, ...]:
        return self._store.snapshot()

    @property
    def loaded_count(self) -> int:
        if self._mode is SortMode.CLIENT:
            return len(self._store)
        return self._cursor.loaded_count

    @property
    def page_size(self) -> int:
        return self._cursor.page_size

    @property
    def exhausted(self) -> bool:
        """True once the source returned a short page for the current sort."""
        return self._cursor.exhausted

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    @property
    def load_state(self) -> LoadState:
        if self._loading:
            return LoadState.LOADING
        if self._completed_loads and self._store.is_empty:
            return LoadState.EMPTY
        return LoadState.IDLE

    # -- public API --------------------------------------------------------

    async def start(self) -> None:
        """Perform the first load, honouring the configured initial sort.

        Client tables are sorted in place (or just announced when no initial
        sort applies); server tables fetch their first page.
        """
        initial = self._initial_sort
        if initial is not None and initial.column_id is not None:
            if await self.apply_sort(initial.column_id, initial.direction):
                return
            self._logger.warning("Initial sort column %r ignored", initial.column_id)
        if self._mode is SortMode.CLIENT:
            self.rows_changed.emit(self._store.snapshot())
            return
        await self.load_next_page()

    async def apply_sort(self, column_id: Optional[str], direction: Any = None) -> bool:
        """Sort by *column_id*; toggle the direction when *direction* is None.

        Returns ``False`` when the request names an unknown or non-sortable
        column, in which case nothing changes.
        """
        try:
            column = self._sortable_column(column_id)
        except InvalidSortRequest as exc:
            self._logger.debug("Ignoring sort request: %s", exc)
            return False

        if direction is None:
            state = self.sort_state.toggled(column.id)
        else:
            state = self.sort_state.with_column(column.id, SortDirection.coerce(direction))
        self._sort.value = state
        self._publish(
            SortAppliedEvent(
                column_id=state.column_id,
                direction=state.direction.value,
                mode=self._mode.value,
                source=__name__,
            )
        )

        if self._mode is SortMode.CLIENT:
            self._sort_locally(column, state.direction)
        else:
            await self._restart_pagination()
        return True

    async def load_next_page(self) -> bool:
        """Fetch the next window and append it; returns ``True`` if applied.

        No-op while another load is in flight and in client mode.  Data source
        failures reset the load state to idle, are emitted on
        ``error_occurred`` and propagate to the caller.
        """
        if self._mode is SortMode.CLIENT:
            return False
        if self._loading:
            self._logger.debug("Load already in flight; dropping request")
            return False

        generation = self._generation
        window = self._cursor.window()
        query = RowQuery(params=dict(self._params))
        query.sorted_by(self.sort_state.column_id, self.sort_state.direction)
        query.window(window.offset, window.limit)

        self._loading = True
        self._publish_load_state()
        try:
            rows = await self._data_source.query(query)
        except asyncio.CancelledError:
            self._finish_failed_load(generation)
            raise
        except Exception as exc:
            if generation != self._generation:
                self._logger.debug(
                    "Superseded request for rows %d-%d failed: %s", window.offset, window.end, exc
                )
                raise
            self._finish_failed_load(generation)
            self._logger.error("Failed to load rows %d-%d: %s", window.offset, window.end, exc)
            self.error_occurred.emit(exc)
            raise

        rows = list(rows)
        if generation != self._generation:
            self._logger.info(
                "Discarding %d rows from superseded request (generation %d, current %d)",
                len(rows),
                generation,
                self._generation,
            )
            self._publish(
                StalePageDiscardedEvent(
                    generation=generation,
                    current_generation=self._generation,
                    received=len(rows),
                    source=__name__,
                )
            )
            return False

        self._store.append(rows)
        self._cursor.advance(len(rows))
        self._completed_loads += 1
        self._loading = False
        self._publish_load_state()
        self.rows_changed.emit(self._store.snapshot())
        self._publish(
            PageLoadedEvent(
                offset=window.offset,
                requested=window.limit,
                received=len(rows),
                loaded_count=self._cursor.loaded_count,
                source=__name__,
            )
        )
        return True

    async def on_scroll_proximity(self, is_near_end: bool) -> bool:
        """Load the next page when the viewport nears the end of the rows."""
        if not is_near_end or self._loading or self._mode is SortMode.CLIENT:
            return False
        if self._cursor.exhausted:
            self._logger.debug("All rows loaded; ignoring scroll trigger")
            return False
        return await self.load_next_page()

    async def reload(self) -> None:
        """Restart pagination (server) or re-apply the sort (client)."""
        if self._mode is SortMode.CLIENT:
            column_id = self.sort_state.column_id
            if column_id is not None:
                self._sort_locally(self._columns[column_id], self.sort_state.direction)
            else:
                self.rows_changed.emit(self._store.snapshot())
            return
        await self._restart_pagination()

    async def set_query_params(self, **params: Any) -> None:
        """Update extra query parameters and reload from the first page.

        A value of ``None`` removes the parameter.
        """
        for key, value in params.items():
            if value is None:
                self._params.pop(key, None)
            else:
                self._params[key] = value
        await self.reload()

    def attach_renderer(self, renderer: IRowsRenderer) -> None:
        """Connect *renderer* to the row and load state signals.

        The renderer immediately receives the current rows and load state.
        """
        self.rows_changed.connect(renderer.rows_changed)
        self.load_state_changed.connect(renderer.load_state_changed)
        renderer.load_state_changed(self.load_state)
        renderer.rows_changed(self._store.snapshot())

    def formatted_rows(self) -> list[tuple[Any, ...]]:
        """Return every row as a tuple of formatted cells in column order."""
        return [
            tuple(column.format(column.value_of(record)) for column in self._column_order)
            for record in self._store.snapshot()
        ]

    def dispose(self) -> None:
        """Tear the engine down; results still in flight are discarded."""
        self._generation += 1
        self._loading = False
        self._completed_loads = 0
        self._store.clear()
        self._cursor.reset()
        super().dispose()

    # -- internal ----------------------------------------------------------

    def _sortable_column(self, column_id: Optional[str]) -> ColumnDescriptor:
        column = self._columns.get(column_id) if column_id is not None else None
        if column is None:
            raise InvalidSortRequest(column_id)
        if not column.sortable:
            raise InvalidSortRequest(column_id, "column is not sortable")
        return column

    def _sort_locally(self, column: ColumnDescriptor, direction: SortDirection) -> None:
        compare = self._comparators.for_column(column)
        sign = direction.sign
        column_id = column.id

        def _compare_records(a: Record, b: Record) -> float:
            return sign * compare(a.get(column_id), b.get(column_id))

        self._store.sort_in_place(_compare_records)
        self.rows_changed.emit(self._store.snapshot())

    async def _restart_pagination(self) -> None:
        self._generation += 1
        # Empty only counts once a load of the new generation has completed.
        self._completed_loads = 0
        self._store.clear()
        self._cursor.reset()
        # A request from the previous generation may still be pending; its
        # result is discarded, so the new load must not wait for it.
        self._loading = False
        self.rows_changed.emit(self._store.snapshot())
        await self.load_next_page()

    def _finish_failed_load(self, generation: int) -> None:
        if generation == self._generation:
            self._loading = False
            self._publish_load_state()

    def _publish_load_state(self) -> None:
        state = self.load_state
        if state is not self._last_load_state:
            self._last_load_state = state
            self.load_state_changed.emit(state)

    def _publish(self, event: Any) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
