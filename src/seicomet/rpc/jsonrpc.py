"""
JSON-RPC 2.0 envelopes.

Requests are plain frozen dataclasses; responses keep the raw ``result``
payload exactly as the node sent it so that fields unknown to the typed
decoders can still be read afterwards.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..spec.schemas import JSONRPC_RESPONSE_SCHEMA, SchemaRegistry

JsonRpcId = Union[int, str, None]

_ids = itertools.count(1)


class JsonRpcError(RuntimeError):
    """Error object returned by the node instead of a result."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        detail = f"RPC error {code}: {message}"
        if data:
            detail += f" ({data})"
        super().__init__(detail)
        self.code = code
        self.message = message
        self.data = data


@dataclass(frozen=True)
class JsonRpcRequest:
    method: str
    id: JsonRpcId
    params: dict[str, Any] = field(default_factory=dict)
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class JsonRpcSuccessResponse:
    id: JsonRpcId
    result: Any
    jsonrpc: str = "2.0"


def make_json_rpc_id() -> int:
    return next(_ids)


def create_json_rpc_request(
    method: str, params: Optional[dict[str, Any]] = None
) -> JsonRpcRequest:
    """Build a request with a fresh id."""
    return JsonRpcRequest(method=method, id=make_json_rpc_id(), params=dict(params or {}))


def parse_json_rpc_response(
    data: Any, registry: Optional[SchemaRegistry] = None
) -> JsonRpcSuccessResponse:
    """
    Validate a decoded JSON body and turn it into a success envelope.

    Args:
        data: Decoded JSON body of the HTTP response
        registry: Schema registry (default: bundled schemas)

    Returns:
        Success envelope with the untouched ``result`` payload

    Raises:
        SchemaValidationError: If the body is not a JSON-RPC 2.0 response
        JsonRpcError: If the node returned an error object
    """
    registry = registry or SchemaRegistry.default()
    registry.validate_instance(data, JSONRPC_RESPONSE_SCHEMA)

    if "error" in data:
        error = data["error"]
        raise JsonRpcError(error["code"], error["message"], error.get("data"))

    return JsonRpcSuccessResponse(id=data["id"], result=data["result"], jsonrpc=data["jsonrpc"])


__all__ = [
    "JsonRpcError",
    "JsonRpcId",
    "JsonRpcRequest",
    "JsonRpcSuccessResponse",
    "create_json_rpc_request",
    "make_json_rpc_id",
    "parse_json_rpc_response",
]
