"""Offset bookkeeping for incremental loads."""

from __future__ import annotations

from dataclasses import dataclass

from sortgrid.config import DEFAULT_PAGE_SIZE
from sortgrid.errors import ConfigurationError


@dataclass
class PageWindow:
    """The half-open row range ``[offset, offset + limit)`` of one request."""

    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def end(self) -> int:
        return self.offset + self.limit


class PageCursor:
    """Running count of loaded rows plus the fixed page size.

    ``loaded_count`` always equals the number of rows held by the store in
    server mode.  ``exhausted`` becomes true once a page comes back shorter
    than requested and is cleared by :meth:`reset`.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise ConfigurationError(f"page_size must be a positive integer, got {page_size!r}")
        self._page_size = page_size
        self._loaded_count = 0
        self._exhausted = False

    # -- properties --------------------------------------------------------

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def loaded_count(self) -> int:
        return self._loaded_count

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    # -- public API --------------------------------------------------------

    def window(self) -> PageWindow:
        """Return the window the next request should cover."""
        return PageWindow(offset=self._loaded_count, limit=self._page_size)

    def advance(self, received: int) -> None:
        """Record that *received* rows arrived for the current window."""
        if received < 0:
            raise ValueError("received must be non-negative")
        self._loaded_count += received
        if received < self._page_size:
            self._exhausted = True

    def reset(self) -> None:
        self._loaded_count = 0
        self._exhausted = False
