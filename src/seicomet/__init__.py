__all__ = [
    # Adapter
    "CometClient",
    "FinalizeBlockMode",
    "connect_comet",
    "decode_block_results_merged",
    "decode_block_results_separate",
    "decode_events",
    # Wrapped client
    "CometVersion",
    "TendermintClient",
    "detect_version",
    # Transport
    "HttpRpcTransport",
    "RpcTransport",
    "JsonRpcRequest",
    "JsonRpcSuccessResponse",
    # Responses
    "BlockResponse",
    "BlockResultsResponse",
    "Event",
    "EventAttribute",
    "FinalizeBlockResultsResponse",
    "StatusResponse",
    "ValidatorsResponse",
    "ValidatorsParams",
    # Errors
    "DecodingError",
    "JsonRpcError",
    "ResponseMismatchError",
    "SchemaValidationError",
    "UnsupportedVersionError",
]

from .overrides import (
    CometClient,
    FinalizeBlockMode,
    connect_comet,
    decode_block_results_merged,
    decode_block_results_separate,
    decode_events,
)
from .rpc.jsonrpc import JsonRpcError, JsonRpcRequest, JsonRpcSuccessResponse
from .rpc.transport import HttpRpcTransport, ResponseMismatchError, RpcTransport
from .spec.schemas import SchemaValidationError
from .tendermint.adaptor import CometVersion
from .tendermint.client import TendermintClient, UnsupportedVersionError, detect_version
from .tendermint.encodings import DecodingError
from .tendermint.requests import ValidatorsParams
from .tendermint.responses import (
    BlockResponse,
    BlockResultsResponse,
    Event,
    EventAttribute,
    FinalizeBlockResultsResponse,
    StatusResponse,
    ValidatorsResponse,
)
