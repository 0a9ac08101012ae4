from .data_store import DataStore
from .page_cursor import PageCursor, PageWindow

__all__ = ["DataStore", "PageCursor", "PageWindow"]
