"""
HTTP transport for Tendermint/CometBFT JSON-RPC.

The node's RPC endpoint (default port 26657) accepts JSON-RPC 2.0 over a
plain HTTP POST to its root path. Transport and HTTP failures are raised
as ``httpx`` exceptions; nothing here retries.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Protocol

import httpx

from .jsonrpc import JsonRpcRequest, JsonRpcSuccessResponse, parse_json_rpc_response

logger = logging.getLogger(__name__)

# Default RPC endpoint (local node)
DEFAULT_RPC_URL = "http://127.0.0.1:26657"
DEFAULT_RPC_TIMEOUT = 30.0


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("COMET_RPC_URL", DEFAULT_RPC_URL)


def get_rpc_timeout() -> float:
    """Get the request timeout (seconds) from environment or default."""
    return float(os.environ.get("COMET_RPC_TIMEOUT", str(DEFAULT_RPC_TIMEOUT)))


class ResponseMismatchError(RuntimeError):
    pass


class RpcTransport(Protocol):
    async def execute(self, request: JsonRpcRequest) -> JsonRpcSuccessResponse:
        ...

    async def disconnect(self) -> None:
        ...


class HttpRpcTransport:
    """
    JSON-RPC transport over ``httpx.AsyncClient``.

    The response envelope is returned with its ``result`` payload intact,
    including fields no decoder knows about.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        headers: Optional[dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url or get_rpc_url()
        if not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Unsupported RPC URL scheme: {self.url}")
        self.timeout = timeout if timeout is not None else get_rpc_timeout()
        self._client = client or httpx.AsyncClient(timeout=self.timeout, headers=headers)

    async def execute(self, request: JsonRpcRequest) -> JsonRpcSuccessResponse:
        """
        POST a request and parse the response envelope.

        Raises:
            httpx.HTTPError: On connection failure, timeout or non-2xx status
            JsonRpcError: If the node answered with an error object
            ResponseMismatchError: If the response id differs from the request id
        """
        logger.debug("-> %s id=%s params=%s", request.method, request.id, request.params)
        response = await self._client.post(self.url, json=request.to_dict())
        response.raise_for_status()
        envelope = parse_json_rpc_response(response.json())

        if envelope.id != request.id:
            raise ResponseMismatchError(
                f"Response id {envelope.id!r} does not match request id {request.id!r}"
            )

        logger.debug("<- %s id=%s", request.method, envelope.id)
        return envelope

    async def disconnect(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpRpcTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()
