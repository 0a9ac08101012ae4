from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from sortgrid.errors import ConfigurationError


class ValueType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"

    @classmethod
    def parse(cls, raw: Any) -> "ValueType":
        """Return the member for *raw*, raising ``ConfigurationError`` if unknown."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).lower())
        except ValueError as exc:
            raise ConfigurationError(f"Unknown value type: {raw!r}") from exc


@dataclass(frozen=True)
class ColumnDescriptor:
    """Static metadata for one displayable field of a row."""

    id: str
    sortable: bool = False
    value_type: ValueType = ValueType.STRING
    cell_formatter: Optional[Callable[[Any], Any]] = field(default=None, compare=False)
    title: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "value_type", ValueType.parse(self.value_type))

    @property
    def label(self) -> str:
        return self.title or self.id

    def value_of(self, record: Mapping[str, Any]) -> Any:
        return record.get(self.id)

    def format(self, value: Any) -> Any:
        """Render *value* through the cell formatter, if one is configured."""
        if self.cell_formatter is None:
            return value
        return self.cell_formatter(value)


def index_columns(columns: Iterable[ColumnDescriptor]) -> dict[str, ColumnDescriptor]:
    """Map column ids to descriptors, rejecting duplicate ids."""
    index: dict[str, ColumnDescriptor] = {}
    for column in columns:
        if not column.id:
            raise ConfigurationError("Column id must be a non-empty string")
        if column.id in index:
            raise ConfigurationError(f"Duplicate column id: {column.id!r}")
        index[column.id] = column
    return index


def columns_from_config(entries: Sequence[Mapping[str, Any]]) -> list[ColumnDescriptor]:
    """Build descriptors from plain mappings such as a parsed settings file."""
    columns = []
    for entry in entries:
        columns.append(
            ColumnDescriptor(
                id=entry["id"],
                sortable=bool(entry.get("sortable", False)),
                value_type=ValueType.parse(entry.get("value_type", ValueType.STRING)),
                title=entry.get("title", ""),
            )
        )
    return columns
