"""Tests for column descriptors, sort state and row queries."""

from __future__ import annotations

import pytest

from sortgrid.domain.models.column import (
    ColumnDescriptor,
    ValueType,
    columns_from_config,
    index_columns,
)
from sortgrid.domain.models.query import RowQuery
from sortgrid.domain.models.sort import SortDirection, SortState
from sortgrid.errors import ConfigurationError


class TestColumnDescriptor:
    def test_defaults(self):
        column = ColumnDescriptor(id="title")
        assert column.sortable is False
        assert column.value_type is ValueType.STRING
        assert column.label == "title"

    def test_formatter_applied(self):
        column = ColumnDescriptor(id="price", cell_formatter=lambda v: f"${v}")
        assert column.format(12) == "$12"

    def test_format_without_formatter_returns_raw(self):
        assert ColumnDescriptor(id="price").format(12) == 12

    def test_immutable(self):
        column = ColumnDescriptor(id="price")
        with pytest.raises(AttributeError):
            column.sortable = True  # type: ignore[misc]

    def test_value_type_parse(self):
        assert ValueType.parse("NUMBER") is ValueType.NUMBER
        with pytest.raises(ConfigurationError):
            ValueType.parse("currency")

    def test_string_value_type_is_coerced(self):
        column = ColumnDescriptor(id="price", value_type="Number")  # type: ignore[arg-type]
        assert column.value_type is ValueType.NUMBER
        assert column == ColumnDescriptor(id="price", value_type=ValueType.NUMBER)

    def test_unknown_string_value_type_rejected(self):
        with pytest.raises(ConfigurationError, match="currency"):
            ColumnDescriptor(id="price", value_type="currency")  # type: ignore[arg-type]

    def test_index_rejects_duplicates(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            index_columns([ColumnDescriptor(id="a"), ColumnDescriptor(id="a")])

    def test_index_rejects_empty_id(self):
        with pytest.raises(ConfigurationError):
            index_columns([ColumnDescriptor(id="")])

    def test_columns_from_config(self):
        columns = columns_from_config(
            [
                {"id": "title", "title": "Name", "sortable": True},
                {"id": "price", "value_type": "number", "sortable": True},
            ]
        )
        assert [c.id for c in columns] == ["title", "price"]
        assert columns[0].label == "Name"
        assert columns[1].value_type is ValueType.NUMBER


class TestSortState:
    def test_initially_unset(self):
        state = SortState()
        assert state.column_id is None
        assert state.is_set is False

    def test_toggle_new_column_defaults_to_ascending(self):
        state = SortState().toggled("price")
        assert state == SortState("price", SortDirection.ASCENDING)

    def test_toggle_cycles_without_unsorted(self):
        state = SortState().toggled("price")
        state = state.toggled("price")
        assert state.direction is SortDirection.DESCENDING
        state = state.toggled("price")
        assert state.direction is SortDirection.ASCENDING
        assert state.column_id == "price"

    def test_switching_column_resets_direction(self):
        state = SortState("price", SortDirection.DESCENDING).toggled("title")
        assert state == SortState("title", SortDirection.ASCENDING)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("asc", SortDirection.ASCENDING),
            ("ascending", SortDirection.ASCENDING),
            ("desc", SortDirection.DESCENDING),
            ("descending", SortDirection.DESCENDING),
            ("bogus", SortDirection.DESCENDING),
            (SortDirection.ASCENDING, SortDirection.ASCENDING),
        ],
    )
    def test_direction_coerce(self, raw, expected):
        assert SortDirection.coerce(raw) is expected


class TestRowQuery:
    def test_fluent_window(self):
        query = RowQuery().sorted_by("price", SortDirection.DESCENDING).window(20, 20)
        assert query.sort_column_id == "price"
        assert query.offset == 20
        assert query.end == 40

    def test_open_ended(self):
        assert RowQuery().end is None

    def test_params(self):
        query = RowQuery().with_params(from_="2020-01-01")
        assert query.params == {"from_": "2020-01-01"}
