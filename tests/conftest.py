from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from seicomet.rpc.jsonrpc import JsonRpcRequest, JsonRpcSuccessResponse

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    with (FIXTURES_ROOT / name).open("r", encoding="utf-8") as f:
        return json.load(f)


class FakeTransport:
    """In-memory transport answering each method with a canned result."""

    def __init__(self, results: dict[str, Any]) -> None:
        self.results = results
        self.requests: list[JsonRpcRequest] = []
        self.closed = False

    async def execute(self, request: JsonRpcRequest) -> JsonRpcSuccessResponse:
        if self.closed:
            raise RuntimeError("Cannot send a request, as the client has been closed.")
        self.requests.append(request)
        result = self.results[request.method]
        if isinstance(result, BaseException):
            raise result
        return JsonRpcSuccessResponse(id=request.id, result=result)

    async def disconnect(self) -> None:
        self.closed = True


@pytest.fixture()
def fixture_loader() -> Callable[[str], dict[str, Any]]:
    return load_fixture


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport(
        {
            "status": load_fixture("status.json"),
            "block": load_fixture("block.json"),
            "block_results": load_fixture("block_results.json"),
            "validators": load_fixture("validators.json"),
        }
    )
