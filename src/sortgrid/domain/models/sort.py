from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    @property
    def sign(self) -> int:
        return 1 if self is SortDirection.ASCENDING else -1

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING

    @classmethod
    def coerce(cls, raw: Any) -> "SortDirection":
        """Accept enum members and the usual spellings.

        Anything other than an ascending spelling means descending, the same
        leniency the header click handler always had.
        """
        if isinstance(raw, cls):
            return raw
        if str(raw).lower() in ("asc", "ascending"):
            return cls.ASCENDING
        return cls.DESCENDING


class SortMode(str, Enum):
    CLIENT = "client"
    SERVER = "server"


@dataclass(frozen=True)
class SortState:
    """Active sort column and direction.

    ``column_id`` is ``None`` only until the first sort is applied.  Once a
    column is active the direction cycles between ascending and descending;
    there is no way back to an unsorted state.
    """

    column_id: Optional[str] = None
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def is_set(self) -> bool:
        return self.column_id is not None

    def toggled(self, column_id: str) -> "SortState":
        if column_id == self.column_id:
            return replace(self, direction=self.direction.flipped())
        return SortState(column_id=column_id, direction=SortDirection.ASCENDING)

    def with_column(self, column_id: str, direction: SortDirection) -> "SortState":
        return SortState(column_id=column_id, direction=direction)
