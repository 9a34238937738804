"""
Tests for the explorer client and the failure-isolating category fetcher.

HTTP is served by httpx.MockTransport; no network access.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from conftest import ADDRESS, NORMAL_TXS, error_payload, explorer_transport

from chain_ingest.core.exceptions import FetchError
from chain_ingest.explorer import Category, CategoryFetcher, ExplorerClient


def _fetch(network, transport, category, *, api_key="test-key", outcome=False):
    async def go():
        async with httpx.AsyncClient(transport=transport) as client:
            fetcher = CategoryFetcher(ExplorerClient(network, client, api_key=api_key))
            if outcome:
                return await fetcher.fetch_outcome(ADDRESS, category)
            return await fetcher.fetch(ADDRESS, category)

    return asyncio.run(go())


def test_request_parameters(ethereum):
    calls: list[httpx.Request] = []
    records = _fetch(ethereum, explorer_transport(calls=calls), Category.TOKEN)
    assert len(records) == 1
    assert len(calls) == 1
    req = calls[0]
    assert req.method == "GET"
    assert req.url.host == "api.etherscan.io"
    params = req.url.params
    assert params["module"] == "account"
    assert params["action"] == "tokentx"
    assert params["address"] == ADDRESS
    assert params["startblock"] == "0"
    assert params["endblock"] == "99999999"
    assert params["sort"] == "asc"
    assert params["apikey"] == "test-key"


def test_category_actions():
    assert Category.NORMAL.action == "txlist"
    assert Category.TOKEN.action == "tokentx"
    assert Category.INTERNAL.action == "txlistinternal"


def test_fetch_success_returns_raw_records(ethereum):
    records = _fetch(ethereum, explorer_transport(), Category.NORMAL)
    assert [r.hash for r in records] == ["0xaaa1", "0xaaa2"]
    assert records[0].value == NORMAL_TXS[0]["value"]
    assert records[1].to_address == ""


def test_fetch_skips_non_dict_items(ethereum):
    transport = explorer_transport({"txlist": [NORMAL_TXS[0], "garbage", 42]})
    records = _fetch(ethereum, transport, Category.NORMAL)
    assert [r.hash for r in records] == ["0xaaa1"]


@pytest.mark.parametrize(
    "answer",
    [
        error_payload("NOTOK", "Invalid API Key"),
        httpx.Response(500, text="upstream down"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        {"status": "1", "message": "OK", "result": "Max rate limit reached"},
    ],
    ids=["bad-status", "http-500", "non-json", "non-object", "result-not-list"],
)
def test_fetch_failure_degrades_to_empty(ethereum, answer):
    outcome = _fetch(ethereum, explorer_transport({"txlistinternal": answer}), Category.INTERNAL, outcome=True)
    assert outcome.records == []
    assert outcome.ok is False
    assert outcome.error
    assert outcome.category is Category.INTERNAL


def test_no_records_is_empty_not_degraded(ethereum):
    transport = explorer_transport({"tokentx": error_payload("No transactions found", result=[])})
    outcome = _fetch(ethereum, transport, Category.TOKEN, outcome=True)
    assert outcome.records == []
    assert outcome.ok


def test_fetch_transport_error_degrades_to_empty(ethereum):
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    records = _fetch(ethereum, explorer_transport({"txlist": boom}), Category.NORMAL)
    assert records == []


def test_fetch_error_message_includes_explorer_detail(ethereum):
    outcome = _fetch(
        ethereum,
        explorer_transport({"txlist": error_payload("NOTOK", "Missing/Invalid API Key")}),
        Category.NORMAL,
        api_key=None,
        outcome=True,
    )
    assert outcome.error == "NOTOK: Missing/Invalid API Key"


def test_missing_api_key_is_still_sent(ethereum):
    calls: list[httpx.Request] = []
    _fetch(ethereum, explorer_transport(calls=calls), Category.NORMAL, api_key=None)
    assert calls[0].url.params["apikey"] == ""


def test_client_raises_fetch_error(ethereum):
    async def go():
        transport = explorer_transport({"txlist": httpx.Response(502)})
        async with httpx.AsyncClient(transport=transport) as client:
            await ExplorerClient(ethereum, client).fetch_records(ADDRESS, Category.NORMAL)

    with pytest.raises(FetchError) as exc:
        asyncio.run(go())
    assert exc.value.network == "ethereum"
    assert exc.value.category == "normal"


def test_fetch_rejects_empty_address(ethereum):
    async def go():
        async with httpx.AsyncClient(transport=explorer_transport()) as client:
            await CategoryFetcher(ExplorerClient(ethereum, client)).fetch("  ", Category.NORMAL)

    with pytest.raises(ValueError, match="non-empty"):
        asyncio.run(go())
