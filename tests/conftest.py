"""
Pytest fixtures for Chain Ingest tests. Uses a temporary data dir for the
per-network SQLite stores and httpx.MockTransport in place of the explorers.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from chain_ingest.config.networks import AppConfig

ADDRESS = "0x742d35cc6634c0532925a3b844bc454e4438f44e"

# 256-bit value that would lose precision as a float
HUGE_VALUE = "115792089237316195423570985008687907853269984665640564039457584007913129639935"

NORMAL_TXS = [
    {
        "blockNumber": "100",
        "timeStamp": "1600000000",
        "hash": "0xaaa1",
        "nonce": "7",
        "from": ADDRESS,
        "to": "0x1111111111111111111111111111111111111111",
        "value": HUGE_VALUE,
        "gas": "21000",
        "gasPrice": "20000000000",
        "isError": "0",
        "txreceipt_status": "1",
        "input": "0x",
        "contractAddress": "",
        "cumulativeGasUsed": "21000",
        "gasUsed": "21000",
        "confirmations": "12",
        "transactionIndex": "3",
    },
    {
        "blockNumber": "205",
        "timeStamp": "1600000500",
        "hash": "0xaaa2",
        "nonce": "8",
        "from": ADDRESS,
        "to": "",
        "value": "0",
        "gas": "500000",
        "gasPrice": "20000000000",
        "isError": "1",
        "txreceipt_status": "0",
        "input": "0x6080",
        "contractAddress": "0x2222222222222222222222222222222222222222",
        "cumulativeGasUsed": "900000",
        "gasUsed": "450000",
        "confirmations": "10",
        "transactionIndex": "0",
    },
]

TOKEN_TXS = [
    {
        "blockNumber": "180",
        "timeStamp": "1600000300",
        "hash": "0xbbb1",
        "from": "0x3333333333333333333333333333333333333333",
        "to": ADDRESS,
        "value": "5000000",
        "tokenSymbol": "USDC",
        "tokenDecimal": "6",
        "gas": "60000",
        "gasPrice": "15000000000",
        "gasUsed": "52000",
        "confirmations": "11",
    },
]

INTERNAL_TXS = [
    {
        "blockNumber": "190",
        "timeStamp": "1600000400",
        "hash": "0xccc1",
        "from": "0x4444444444444444444444444444444444444444",
        "to": ADDRESS,
        "value": "1000",
        "type": "call",
        "traceId": "0_1",
        "isError": "0",
    },
]

OK_RESULTS: dict[str, list[dict[str, Any]]] = {
    "txlist": NORMAL_TXS,
    "tokentx": TOKEN_TXS,
    "txlistinternal": INTERNAL_TXS,
}


def ok_payload(result: list[dict[str, Any]]) -> dict[str, Any]:
    return {"status": "1", "message": "OK", "result": result}


def error_payload(message: str = "NOTOK", result: str = "Invalid API Key") -> dict[str, Any]:
    return {"status": "0", "message": message, "result": result}


Responder = Callable[[httpx.Request], httpx.Response]


def explorer_transport(
    results: dict[str, Any] | None = None,
    *,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """
    MockTransport answering by `action` query param. A value may be a list
    (ok payload), a dict (sent as-is), an httpx.Response, an exception
    instance (raised), or a callable(request) -> Response.
    Missing actions answer with the explorer's "No transactions found".
    """
    results = OK_RESULTS if results is None else results

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        action = request.url.params.get("action")
        answer = results.get(action, error_payload("No transactions found", result=[]))
        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            return answer(request)
        if isinstance(answer, httpx.Response):
            return answer
        if isinstance(answer, list):
            return httpx.Response(200, json=ok_payload(answer))
        return httpx.Response(200, json=answer)

    return httpx.MockTransport(handler)


class FakeClock:
    """Deterministic epoch-seconds clock for bookkeeping assertions."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(
        api_keys={"etherscan": "test-key", "polygonscan": "poly-key"},
        data_dir=tmp_path / "blockchain-data",
        http_timeout_sec=5.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ethereum(config):
    return config.networks["ethereum"]


@pytest.fixture
def polygon(config):
    return config.networks["polygon"]
