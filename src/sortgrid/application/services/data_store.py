"""Ordered row storage owned by the fetch orchestrator."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Tuple

Record = Mapping[str, Any]


class DataStore:
    """Ordered sequence of rows; the order is the display order.

    In client mode the store holds the whole dataset and is reordered in
    place.  In server mode it only grows between sort changes and is cleared
    when pagination restarts.  Consumers get immutable snapshots.
    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: List[Record] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.snapshot())

    @property
    def is_empty(self) -> bool:
        return not self._records

    def snapshot(self) -> Tuple[Record, ...]:
        return tuple(self._records)

    def replace(self, records: Iterable[Record]) -> None:
        self._records = list(records)

    def append(self, records: Iterable[Record]) -> int:
        """Append *records* in order and return how many were added."""
        before = len(self._records)
        self._records.extend(records)
        return len(self._records) - before

    def clear(self) -> None:
        self._records.clear()

    def sort_in_place(self, compare: Callable[[Record, Record], float]) -> None:
        """Stable sort with a three-way *compare* over whole records.

        The sort runs on a copy, so a comparator that raises leaves the
        stored order untouched.
        """
        ordered = sorted(self._records, key=cmp_to_key(compare))
        self._records[:] = ordered
