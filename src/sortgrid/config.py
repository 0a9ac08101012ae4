"""Default configuration values for SortGrid."""

from __future__ import annotations

from typing import Final

# Number of rows requested per server round trip.  The dashboard tables load
# twenty rows at a time and ask for more as the user scrolls.
DEFAULT_PAGE_SIZE: Final[int] = 20

# ``ScrollTrigger`` requests the next page once the bottom edge of the loaded
# rows comes within this many pixels of the bottom of the viewport.
SCROLL_LOADING_SHIFT_PX: Final[int] = 100

# Locales used by the default string comparator, in priority order.  The first
# entry decides which script sorts first when two values use different ones.
DEFAULT_COLLATION_LOCALES: Final[tuple[str, ...]] = ("ru", "en")
DEFAULT_CASE_FIRST: Final[str] = "upper"

# ---------------------------------------------------------------------------
# Remote data source
# ---------------------------------------------------------------------------

BACKEND_URL: Final[str] = "https://course-js.javascript.ru"
HTTP_TIMEOUT_SEC: Final[float] = 10.0
HTTP_DEFAULT_RETRIES: Final[int] = 2
HTTP_RETRY_BACKOFF_SEC: Final[float] = 0.5
HTTP_USER_AGENT: Final[str] = "SortGrid/0.1"

# Query parameter names understood by the json-server style backend.
QUERY_PARAM_SORT: Final[str] = "_sort"
QUERY_PARAM_ORDER: Final[str] = "_order"
QUERY_PARAM_START: Final[str] = "_start"
QUERY_PARAM_END: Final[str] = "_end"
