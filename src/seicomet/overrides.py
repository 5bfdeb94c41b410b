"""
Block results decoding for chains that emit ``finalize_block_events``.

Some deployments (Sei among them) report block-finalization events in a
``finalize_block_events`` field of the ``block_results`` result that the
standard decoders ignore. ``CometClient`` wraps a ``TendermintClient`` and
decodes ``block_results`` itself so those events are not lost; every other
method goes straight to the wrapped client.

Two shapes are supported, chosen with ``FinalizeBlockMode``:

- MERGE:    finalize-block events are appended to ``end_block_events``
- SEPARATE: they are returned as ``finalize_block_events`` and the
            begin/end-block events are dropped
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from functools import partial
from typing import Optional, Union

from .rpc.jsonrpc import JsonRpcSuccessResponse
from .rpc.transport import RpcTransport
from .tendermint import requests
from .tendermint.adaptor import CometVersion, Tendermint37Responses, decode_events
from .tendermint.client import TendermintClient, detect_version, do_call
from .tendermint.encodings import assert_object
from .tendermint.responses import (
    BlockResponse,
    BlockResultsResponse,
    Event,
    FinalizeBlockResultsResponse,
    StatusResponse,
    ValidatorsResponse,
)

logger = logging.getLogger(__name__)

FINALIZE_BLOCK_EVENTS_FIELD = "finalize_block_events"


class FinalizeBlockMode(str, Enum):
    MERGE = "merge"
    SEPARATE = "separate"


DEFAULT_MODES: dict[CometVersion, FinalizeBlockMode] = {
    CometVersion.TENDERMINT_37: FinalizeBlockMode.MERGE,
    CometVersion.COMET_38: FinalizeBlockMode.SEPARATE,
}

AnyBlockResults = Union[BlockResultsResponse, FinalizeBlockResultsResponse]


def _finalize_block_events(response: JsonRpcSuccessResponse) -> list[Event]:
    # Read from the raw result; the typed decoders drop unknown fields.
    raw = assert_object(response.result).get(FINALIZE_BLOCK_EVENTS_FIELD)
    if raw is None:
        return []
    return decode_events(raw)


def decode_block_results_merged(
    response: JsonRpcSuccessResponse,
    responses: type[Tendermint37Responses] = Tendermint37Responses,
) -> BlockResultsResponse:
    """Upstream block results with finalize-block events after the end-block events."""
    decoded = responses.decode_block_results(response)
    finalize_events = _finalize_block_events(response)
    logger.debug(
        "block_results height=%s: merging %d finalize-block events",
        decoded.height,
        len(finalize_events),
    )
    return replace(decoded, end_block_events=[*decoded.end_block_events, *finalize_events])


def decode_block_results_separate(
    response: JsonRpcSuccessResponse,
    responses: type[Tendermint37Responses] = Tendermint37Responses,
) -> FinalizeBlockResultsResponse:
    """Upstream block results without begin/end-block events, plus finalize-block events."""
    decoded = responses.decode_block_results(response)
    finalize_events = _finalize_block_events(response)
    logger.debug(
        "block_results height=%s: %d finalize-block events",
        decoded.height,
        len(finalize_events),
    )
    return FinalizeBlockResultsResponse(
        height=decoded.height,
        results=decoded.results,
        validator_updates=decoded.validator_updates,
        consensus_updates=decoded.consensus_updates,
        finalize_block_events=finalize_events,
        app_hash=decoded.app_hash,
    )


_BLOCK_RESULTS_DECODERS = {
    FinalizeBlockMode.MERGE: decode_block_results_merged,
    FinalizeBlockMode.SEPARATE: decode_block_results_separate,
}


class CometClient:
    """
    Drop-in replacement for ``TendermintClient`` with patched block results.

    Use ``CometClient.create`` or ``connect_comet`` to build an instance.
    """

    def __init__(
        self,
        transport: RpcTransport,
        tm_client: TendermintClient,
        mode: FinalizeBlockMode,
    ) -> None:
        self.transport = transport
        self.tm_client = tm_client
        self.mode = FinalizeBlockMode(mode)

    @classmethod
    async def create(
        cls,
        transport: RpcTransport,
        version: CometVersion = CometVersion.TENDERMINT_37,
        mode: Optional[FinalizeBlockMode] = None,
    ) -> "CometClient":
        """
        Create the wrapped client for ``version`` and wrap it.

        Args:
            transport: RPC transport shared with the wrapped client
            version: Protocol revision of the node
            mode: How to expose finalize-block events (default: per version)
        """
        tm_client = await TendermintClient.create(transport, version)
        return cls(transport, tm_client, mode or DEFAULT_MODES[tm_client.version])

    @property
    def version(self) -> CometVersion:
        return self.tm_client.version

    async def block(self, height: Optional[int] = None) -> BlockResponse:
        adaptor = self.tm_client.adaptor
        return await do_call(
            self.transport,
            requests.BlockRequest(height=height),
            adaptor.params.encode_block,
            adaptor.responses.decode_block,
        )

    async def block_results(self, height: Optional[int] = None) -> AnyBlockResults:
        adaptor = self.tm_client.adaptor
        return await do_call(
            self.transport,
            requests.BlockResultsRequest(height=height),
            adaptor.params.encode_block_results,
            partial(_BLOCK_RESULTS_DECODERS[self.mode], responses=adaptor.responses),
        )

    async def validators(
        self, params: Optional[requests.ValidatorsParams] = None
    ) -> ValidatorsResponse:
        return await self.tm_client.validators(params)

    async def status(self) -> StatusResponse:
        return await self.tm_client.status()

    async def disconnect(self) -> None:
        await self.tm_client.disconnect()


async def connect_comet(
    transport: RpcTransport, mode: Optional[FinalizeBlockMode] = None
) -> CometClient:
    """Detect the node's protocol revision and create a matching ``CometClient``."""
    version = await detect_version(transport)
    return await CometClient.create(transport, version, mode)
