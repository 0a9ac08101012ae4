"""REST row source backed by ``httpx``.

Speaks the json-server pagination dialect used by the dashboard backend::

    GET /api/rest/products?_sort=price&_order=desc&_start=20&_end=40

and expects a JSON array of row objects in response.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence

import httpx

from sortgrid.application.interfaces import IRowDataSource, Record
from sortgrid.config import (
    BACKEND_URL,
    HTTP_DEFAULT_RETRIES,
    HTTP_RETRY_BACKOFF_SEC,
    HTTP_TIMEOUT_SEC,
    HTTP_USER_AGENT,
    QUERY_PARAM_END,
    QUERY_PARAM_ORDER,
    QUERY_PARAM_SORT,
    QUERY_PARAM_START,
)
from sortgrid.domain.models.query import RowQuery
from sortgrid.errors import DataSourceError

LOGGER = logging.getLogger(__name__)


def build_query_params(query: RowQuery) -> dict[str, Any]:
    """Translate *query* into request parameters.

    An unsorted query sends empty ``_sort``/``_order`` values so the backend
    falls back to its natural order.
    """
    params: dict[str, Any] = {
        key: value.isoformat() if hasattr(value, "isoformat") else value
        for key, value in query.params.items()
    }
    if query.sort_column_id is None:
        params[QUERY_PARAM_SORT] = ""
        params[QUERY_PARAM_ORDER] = ""
    else:
        params[QUERY_PARAM_SORT] = query.sort_column_id
        params[QUERY_PARAM_ORDER] = query.direction.value
    params[QUERY_PARAM_START] = query.offset
    if query.end is not None:
        params[QUERY_PARAM_END] = query.end
    return params


class HttpRowDataSource(IRowDataSource):
    """Fetch row windows from a REST endpoint.

    Transport errors and non-2xx responses are retried with exponential
    backoff; once retries are exhausted they surface as ``DataSourceError``.
    A client passed in by the caller is left open on :meth:`aclose`.
    """

    def __init__(
        self,
        url: str,
        *,
        base_url: str = BACKEND_URL,
        params: Optional[Mapping[str, Any]] = None,
        client: Optional[httpx.AsyncClient] = None,
        retries: int = HTTP_DEFAULT_RETRIES,
        backoff: float = HTTP_RETRY_BACKOFF_SEC,
        timeout: float = HTTP_TIMEOUT_SEC,
    ) -> None:
        self._url = str(httpx.URL(base_url).join(url))
        self._params = dict(params or {})
        self._retries = retries
        self._backoff = backoff
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": HTTP_USER_AGENT},
            timeout=timeout,
        )

    @property
    def url(self) -> str:
        return self._url

    async def query(self, query: RowQuery) -> Sequence[Record]:
        params = {**self._params, **build_query_params(query)}
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = await self._client.get(self._url, params=params)
                resp.raise_for_status()
                payload = resp.json()
                break
            except (httpx.TimeoutException, httpx.HTTPError) as e:
                if attempt > self._retries:
                    raise DataSourceError(f"Failed to fetch {self._url} after {attempt} attempts: {e}") from e
                LOGGER.warning("Fetching %s failed (attempt %d): %s", self._url, attempt, e)
                await asyncio.sleep(self._backoff * (2 ** (attempt - 1)))
            except ValueError as e:
                raise DataSourceError(f"Invalid JSON from {self._url}: {e}") from e

        if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
            raise DataSourceError(f"Expected a JSON array of objects from {self._url}")
        LOGGER.debug("Fetched %d rows from %s (%s)", len(payload), self._url, params)
        return payload

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
