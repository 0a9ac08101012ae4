import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sortgrid.domain.models.column import ColumnDescriptor, ValueType  # noqa: E402
from sortgrid.domain.models.query import RowQuery  # noqa: E402


class ScriptedDataSource:
    """Data source returning pre-scripted pages and recording every query.

    Each entry of *pages* is either a list of rows or an exception instance
    to raise.  When *gated* is true every query waits on its own
    ``asyncio.Event`` (see :meth:`release`) so tests can interleave triggers
    with an in-flight request.
    """

    def __init__(self, pages: Sequence[Any] = (), gated: bool = False) -> None:
        self._pages = list(pages)
        self._gated = gated
        self.queries: List[RowQuery] = []
        self.gates: List[asyncio.Event] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.queries)

    async def query(self, query: RowQuery):
        self.queries.append(query)
        index = len(self.queries) - 1
        if self._gated:
            gate = asyncio.Event()
            self.gates.append(gate)
            await gate.wait()
        page = self._pages[index] if index < len(self._pages) else []
        if isinstance(page, BaseException):
            raise page
        return list(page)

    def release(self, index: int) -> None:
        self.gates[index].set()

    async def aclose(self) -> None:
        self.closed = True


async def wait_for(predicate: Callable[[], bool], attempts: int = 100) -> None:
    """Yield to the loop until *predicate* holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def price_columns() -> list[ColumnDescriptor]:
    return [ColumnDescriptor(id="price", sortable=True, value_type=ValueType.NUMBER)]


@pytest.fixture
def product_columns() -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor(id="images", sortable=False, title="Image"),
        ColumnDescriptor(id="title", sortable=True, value_type=ValueType.STRING, title="Name"),
        ColumnDescriptor(id="quantity", sortable=True, value_type=ValueType.NUMBER, title="Quantity"),
        ColumnDescriptor(
            id="price",
            sortable=True,
            value_type=ValueType.NUMBER,
            title="Price",
            cell_formatter=lambda value: f"${value}",
        ),
        ColumnDescriptor(id="createdAt", sortable=True, value_type=ValueType.DATE, title="Created"),
    ]


@pytest.fixture
def products() -> list[dict]:
    return [
        {"id": "p1", "title": "Вишня", "quantity": 3, "price": 30, "createdAt": "2021-03-01T10:00:00Z"},
        {"id": "p2", "title": "абрикос", "quantity": 1, "price": 10, "createdAt": "2020-12-24T08:30:00Z"},
        {"id": "p3", "title": "Банан", "quantity": 3, "price": 20, "createdAt": "2021-01-15"},
        {"id": "p4", "title": "Apple", "quantity": 2, "price": 20, "createdAt": "2019-07-04T00:00:00+00:00"},
    ]


@pytest.fixture(scope="module")
def qapp():
    pytest.importorskip("PySide6", reason="PySide6 is required", exc_type=ImportError)
    pytest.importorskip("PySide6.QtWidgets", reason="Qt widgets not available", exc_type=ImportError)
    from PySide6.QtWidgets import QApplication

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def make_source() -> Callable[..., ScriptedDataSource]:
    return ScriptedDataSource


@pytest.fixture
def settle() -> Callable[..., Any]:
    return wait_for
