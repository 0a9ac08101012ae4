from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from sortgrid.domain.models.query import RowQuery

Record = Mapping[str, Any]


class IRowDataSource(ABC):
    """Interface for a paginated, sortable source of table rows."""

    @abstractmethod
    async def query(self, query: RowQuery) -> Sequence[Record]:
        """
        Return the rows in ``[query.offset, query.end)`` ordered by
        ``query.sort_column_id`` / ``query.direction``.
        Implementations raise ``DataSourceError`` on transport failures.
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the source."""
        return None


class IRowsRenderer(ABC):
    """Interface for whatever presents rows; the engine only notifies it."""

    @abstractmethod
    def rows_changed(self, rows: Sequence[Record]) -> None:
        """Receive the complete, ordered row sequence after every change."""
        pass

    @abstractmethod
    def load_state_changed(self, state: Any) -> None:
        """Receive ``LoadState`` transitions (idle, loading, empty)."""
        pass
