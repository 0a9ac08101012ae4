"""In-memory row source that sorts and slices a resident list."""

from __future__ import annotations

import asyncio
import logging
from functools import cmp_to_key
from typing import Iterable, Mapping, Optional, Sequence

from sortgrid.application.interfaces import IRowDataSource, Record
from sortgrid.domain.models.column import ColumnDescriptor, index_columns
from sortgrid.domain.models.query import RowQuery
from sortgrid.domain.services.comparators import ComparatorRegistry

LOGGER = logging.getLogger(__name__)


class InMemoryRowDataSource(IRowDataSource):
    """Serve server-mode queries from a list held in memory.

    Sorting uses the same comparators as client mode, so both modes order
    rows identically.  ``params`` act as equality filters on the rows.
    ``latency`` (seconds) simulates a slow backend.
    """

    def __init__(
        self,
        records: Iterable[Record],
        columns: Iterable[ColumnDescriptor],
        comparators: Optional[ComparatorRegistry] = None,
        latency: float = 0.0,
    ) -> None:
        self._records = list(records)
        self._columns = index_columns(columns)
        self._comparators = comparators or ComparatorRegistry.default()
        self._latency = latency
        self.queries: list[RowQuery] = []

    async def query(self, query: RowQuery) -> Sequence[Record]:
        self.queries.append(query)
        if self._latency:
            await asyncio.sleep(self._latency)

        rows = [row for row in self._records if self._matches(row, query.params)]
        column = self._columns.get(query.sort_column_id) if query.sort_column_id else None
        if column is not None:
            compare = self._comparators.for_column(column)
            sign = query.direction.sign
            rows.sort(key=cmp_to_key(lambda a, b: sign * compare(a.get(column.id), b.get(column.id))))
        elif query.sort_column_id:
            LOGGER.warning("Unknown sort column %r; returning natural order", query.sort_column_id)

        end = query.end if query.end is not None else len(rows)
        return rows[query.offset:end]

    @staticmethod
    def _matches(row: Record, params: Mapping[str, object]) -> bool:
        return all(row.get(key) == value for key, value in params.items())
