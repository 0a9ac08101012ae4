from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .sort import SortDirection


@dataclass
class RowQuery:
    """Row query object - one window of rows under a given sort"""

    sort_column_id: Optional[str] = None
    direction: SortDirection = SortDirection.ASCENDING
    offset: int = 0
    limit: Optional[int] = None
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def end(self) -> Optional[int]:
        """Exclusive end of the requested window."""
        if self.limit is None:
            return None
        return self.offset + self.limit

    def sorted_by(self, column_id: Optional[str], direction: SortDirection):
        self.sort_column_id = column_id
        self.direction = direction
        return self

    def window(self, offset: int, limit: int):
        self.offset = offset
        self.limit = limit
        return self

    def with_params(self, **params: Any):
        self.params.update(params)
        return self
