"""Tests for HttpRowDataSource using httpx's mock transport."""

from __future__ import annotations

import asyncio
from datetime import date

import httpx
import pytest

from sortgrid.domain.models.query import RowQuery
from sortgrid.domain.models.sort import SortDirection
from sortgrid.errors import DataSourceError
from sortgrid.infrastructure.http_data_source import HttpRowDataSource, build_query_params


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _query(**kwargs) -> RowQuery:
    query = RowQuery(params=kwargs.pop("params", {}))
    query.sorted_by(kwargs.get("column"), kwargs.get("direction", SortDirection.ASCENDING))
    query.window(kwargs.get("offset", 0), kwargs.get("limit", 20))
    return query


class TestBuildQueryParams:
    def test_sorted_window(self):
        params = build_query_params(_query(column="price", direction=SortDirection.DESCENDING, offset=20))
        assert params == {"_sort": "price", "_order": "desc", "_start": 20, "_end": 40}

    def test_unsorted_sends_empty_sort(self):
        params = build_query_params(_query())
        assert params["_sort"] == ""
        assert params["_order"] == ""

    def test_extra_params_and_dates(self):
        params = build_query_params(_query(params={"from": date(2020, 1, 1), "category": "phones"}))
        assert params["from"] == "2020-01-01"
        assert params["category"] == "phones"

    def test_unbounded_window_has_no_end(self):
        query = RowQuery()
        assert "_end" not in build_query_params(query)


class TestHttpRowDataSource:
    def test_url_is_joined_with_backend(self):
        source = HttpRowDataSource("api/rest/products", client=_client(lambda r: httpx.Response(200, json=[])))
        assert source.url == "https://course-js.javascript.ru/api/rest/products"

    def test_query_sends_params_and_returns_rows(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": 1}, {"id": 2}])

        source = HttpRowDataSource(
            "api/rest/products",
            params={"embed": "subcategory.category"},
            client=_client(handler),
        )

        rows = asyncio.run(source.query(_query(column="title", offset=0, limit=2)))

        assert rows == [{"id": 1}, {"id": 2}]
        params = seen[0].url.params
        assert params["_sort"] == "title"
        assert params["_order"] == "asc"
        assert params["_start"] == "0"
        assert params["_end"] == "2"
        assert params["embed"] == "subcategory.category"

    def test_retries_server_errors(self):
        responses = [httpx.Response(503), httpx.Response(200, json=[{"id": 1}])]

        def handler(request):
            return responses.pop(0)

        source = HttpRowDataSource("api/rows", client=_client(handler), retries=2, backoff=0)

        assert asyncio.run(source.query(_query())) == [{"id": 1}]
        assert responses == []

    def test_retries_exhausted_raise_data_source_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectTimeout("timed out", request=request)

        source = HttpRowDataSource("api/rows", client=_client(handler), retries=1, backoff=0)

        with pytest.raises(DataSourceError, match="after 2 attempts"):
            asyncio.run(source.query(_query()))
        assert len(calls) == 2

    def test_invalid_json(self):
        source = HttpRowDataSource(
            "api/rows",
            client=_client(lambda r: httpx.Response(200, content=b"<html>")),
            retries=0,
        )
        with pytest.raises(DataSourceError, match="Invalid JSON"):
            asyncio.run(source.query(_query()))

    @pytest.mark.parametrize("payload", [{"rows": []}, [1, 2], "text"])
    def test_payload_must_be_list_of_objects(self, payload):
        source = HttpRowDataSource(
            "api/rows",
            client=_client(lambda r: httpx.Response(200, json=payload)),
            retries=0,
        )
        with pytest.raises(DataSourceError, match="array of objects"):
            asyncio.run(source.query(_query()))

    def test_borrowed_client_stays_open(self):
        client = _client(lambda r: httpx.Response(200, json=[]))
        source = HttpRowDataSource("api/rows", client=client)

        asyncio.run(source.aclose())

        assert client.is_closed is False

    def test_owned_client_is_closed(self):
        source = HttpRowDataSource("api/rows")

        asyncio.run(source.aclose())

        assert source._client.is_closed is True
