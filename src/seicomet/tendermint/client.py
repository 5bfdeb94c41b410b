"""
Tendermint/CometBFT RPC client.

One client class serves both supported protocol revisions; the revision
picks the encoder/decoder set (see ``adaptor.ADAPTORS``).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from ..rpc.jsonrpc import JsonRpcRequest, JsonRpcSuccessResponse
from ..rpc.transport import RpcTransport
from . import requests
from .adaptor import Adaptor, CometVersion, Params, Tendermint37Responses, adaptor_for
from .responses import BlockResponse, BlockResultsResponse, StatusResponse, ValidatorsResponse

logger = logging.getLogger(__name__)

Req = TypeVar("Req")
Res = TypeVar("Res")


class UnsupportedVersionError(ValueError):
    pass


async def do_call(
    transport: RpcTransport,
    request: Req,
    encode: Callable[[Req], JsonRpcRequest],
    decode: Callable[[JsonRpcSuccessResponse], Res],
) -> Res:
    """Encode a request, execute it through the transport and decode the result."""
    response = await transport.execute(encode(request))
    return decode(response)


class TendermintClient:
    """
    Client for one node, bound to one protocol revision.

    Use ``TendermintClient.create`` to build an instance.
    """

    def __init__(self, transport: RpcTransport, version: CometVersion) -> None:
        self.transport = transport
        self.version = CometVersion(version)
        self.adaptor: Adaptor = adaptor_for(self.version)

    @classmethod
    async def create(
        cls,
        transport: RpcTransport,
        version: CometVersion = CometVersion.TENDERMINT_37,
    ) -> "TendermintClient":
        return cls(transport, version)

    async def block(self, height: Optional[int] = None) -> BlockResponse:
        return await do_call(
            self.transport,
            requests.BlockRequest(height=height),
            self.adaptor.params.encode_block,
            self.adaptor.responses.decode_block,
        )

    async def block_results(self, height: Optional[int] = None) -> BlockResultsResponse:
        return await do_call(
            self.transport,
            requests.BlockResultsRequest(height=height),
            self.adaptor.params.encode_block_results,
            self.adaptor.responses.decode_block_results,
        )

    async def validators(
        self, params: Optional[requests.ValidatorsParams] = None
    ) -> ValidatorsResponse:
        return await do_call(
            self.transport,
            requests.ValidatorsRequest(params=params or requests.ValidatorsParams()),
            self.adaptor.params.encode_validators,
            self.adaptor.responses.decode_validators,
        )

    async def status(self) -> StatusResponse:
        return await do_call(
            self.transport,
            requests.StatusRequest(),
            self.adaptor.params.encode_status,
            self.adaptor.responses.decode_status,
        )

    async def disconnect(self) -> None:
        await self.transport.disconnect()


def version_from_node(node_version: str) -> CometVersion:
    """
    Map a node's reported software version to a protocol revision.

    Raises:
        UnsupportedVersionError: For anything other than 0.37.x, 0.38.x or 1.x
    """
    if node_version.startswith("0.37."):
        return CometVersion.TENDERMINT_37
    if node_version.startswith(("0.38.", "1.")):
        return CometVersion.COMET_38
    raise UnsupportedVersionError(f"Unsupported consensus engine version: {node_version!r}")


async def detect_version(transport: RpcTransport) -> CometVersion:
    """Ask the node for its status and pick the matching protocol revision."""
    # status decodes the same way on every supported revision
    status = await do_call(
        transport,
        requests.StatusRequest(),
        Params.encode_status,
        Tendermint37Responses.decode_status,
    )
    version = version_from_node(status.node_info.version)
    logger.info(
        "Node %s runs %s, using protocol %s",
        status.node_info.moniker,
        status.node_info.version,
        version.value,
    )
    return version
