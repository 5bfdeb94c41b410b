"""
Request encoders and response decoders per protocol revision.

Tendermint 0.37 and CometBFT 0.38 share the request encoding and nearly
all response shapes; 0.38 additionally reports ``app_hash`` in
``block_results``. Neither decoder reads ``finalize_block_events``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from ..rpc.jsonrpc import JsonRpcRequest, JsonRpcSuccessResponse, create_json_rpc_request
from . import requests
from .encodings import (
    DecodingError,
    api_to_big_int,
    api_to_small_int,
    assert_array,
    assert_boolean,
    assert_not_empty,
    assert_number,
    assert_object,
    assert_string,
    from_base64,
    from_hex,
    from_rfc3339_with_nanoseconds,
    may,
    small_int_to_api,
)
from .responses import (
    Block,
    BlockId,
    BlockParams,
    BlockResponse,
    BlockResultsResponse,
    Commit,
    CommitSignature,
    ConsensusParams,
    Event,
    EventAttribute,
    EvidenceParams,
    Header,
    NodeInfo,
    PartSetHeader,
    ProtocolVersion,
    StatusResponse,
    SyncInfo,
    TxData,
    Validator,
    ValidatorPubkey,
    ValidatorUpdate,
    ValidatorsResponse,
    Version,
)


class CometVersion(str, Enum):
    TENDERMINT_37 = "0.37"
    COMET_38 = "0.38"


PUBKEY_TYPES = {
    "tendermint/PubKeyEd25519": "ed25519",
    "tendermint/PubKeySecp256k1": "secp256k1",
}


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise DecodingError(f"Missing field: {key}")
    return data[key]


# ============ Requests ============


def _encode_height_param(height: Optional[int]) -> dict[str, Any]:
    if height is None:
        return {}
    return {"height": small_int_to_api(height)}


class Params:
    """Request encoders. Omitted parameters are left out of ``params``."""

    @staticmethod
    def encode_block(req: requests.BlockRequest) -> JsonRpcRequest:
        return create_json_rpc_request(req.method.value, _encode_height_param(req.height))

    @staticmethod
    def encode_block_results(req: requests.BlockResultsRequest) -> JsonRpcRequest:
        return create_json_rpc_request(req.method.value, _encode_height_param(req.height))

    @staticmethod
    def encode_status(req: requests.StatusRequest) -> JsonRpcRequest:
        return create_json_rpc_request(req.method.value)

    @staticmethod
    def encode_validators(req: requests.ValidatorsRequest) -> JsonRpcRequest:
        params: dict[str, Any] = _encode_height_param(req.params.height)
        if req.params.page is not None:
            params["page"] = small_int_to_api(req.params.page)
        if req.params.per_page is not None:
            params["per_page"] = small_int_to_api(req.params.per_page)
        return create_json_rpc_request(req.method.value, params)


# ============ Events / results ============


def decode_event_attribute(data: Any) -> EventAttribute:
    attribute = assert_object(data)
    value = attribute.get("value")
    return EventAttribute(
        key=assert_string(_require(attribute, "key")),
        value="" if value is None else assert_string(value),
    )


def decode_event(data: Any) -> Event:
    event = assert_object(data)
    # attributes can be omitted entirely
    attributes = event.get("attributes")
    return Event(
        type=assert_string(_require(event, "type")),
        attributes=[decode_event_attribute(a) for a in assert_array(attributes)] if attributes else [],
    )


def decode_events(data: Any) -> list[Event]:
    return [decode_event(event) for event in assert_array(data)]


def decode_tx_data(data: Any) -> TxData:
    tx = assert_object(data)
    return TxData(
        code=api_to_small_int(tx.get("code") or 0),
        codespace=may(assert_string, tx.get("codespace")),
        log=may(assert_string, tx.get("log")),
        data=may(from_base64, tx.get("data")),
        events=decode_events(tx.get("events") or []),
        gas_wanted=api_to_big_int(tx.get("gas_wanted") or "0"),
        gas_used=api_to_big_int(tx.get("gas_used") or "0"),
    )


def decode_pubkey(data: Any) -> ValidatorPubkey:
    """
    Decode a validator public key.

    Accepts the amino JSON form ``{"type": ..., "value": <base64>}`` and the
    protobuf JSON form ``{"Sum": {"value": {"ed25519": <base64>}}}`` used in
    validator updates.
    """
    pubkey = assert_object(data)
    if "Sum" in pubkey:
        value = assert_object(_require(assert_object(pubkey["Sum"]), "value"))
        for algorithm in ("ed25519", "secp256k1"):
            if algorithm in value:
                return ValidatorPubkey(algorithm=algorithm, data=from_base64(value[algorithm]))
        raise DecodingError(f"Unknown pubkey algorithm in {sorted(value)}")

    key_type = assert_string(_require(pubkey, "type"))
    if key_type not in PUBKEY_TYPES:
        raise DecodingError(f"Unknown pubkey type: {key_type}")
    return ValidatorPubkey(algorithm=PUBKEY_TYPES[key_type], data=from_base64(_require(pubkey, "value")))


def decode_validator_update(data: Any) -> ValidatorUpdate:
    update = assert_object(data)
    return ValidatorUpdate(
        pubkey=may(decode_pubkey, update.get("pub_key")),
        voting_power=api_to_big_int(update.get("power") or "0"),
    )


def decode_block_params(data: Any) -> BlockParams:
    params = assert_object(data)
    return BlockParams(
        max_bytes=api_to_small_int(assert_not_empty(params.get("max_bytes"))),
        max_gas=api_to_small_int(assert_not_empty(params.get("max_gas"))),
    )


def decode_evidence_params(data: Any) -> EvidenceParams:
    params = assert_object(data)
    return EvidenceParams(
        max_age_num_blocks=api_to_small_int(assert_not_empty(params.get("max_age_num_blocks"))),
        max_age_duration=api_to_small_int(assert_not_empty(params.get("max_age_duration"))),
    )


def decode_consensus_params(data: Any) -> ConsensusParams:
    params = assert_object(data)
    return ConsensusParams(
        block=may(decode_block_params, params.get("block")),
        evidence=may(decode_evidence_params, params.get("evidence")),
    )


# ============ Blocks ============


def decode_block_id(data: Any) -> BlockId:
    block_id = assert_object(data)
    parts = assert_object(_require(block_id, "parts"))
    return BlockId(
        hash=from_hex(_require(block_id, "hash")),
        parts=PartSetHeader(
            total=api_to_small_int(_require(parts, "total")),
            hash=from_hex(_require(parts, "hash")),
        ),
    )


def decode_header(data: Any) -> Header:
    header = assert_object(data)
    version = assert_object(_require(header, "version"))
    last_block_id = assert_object(_require(header, "last_block_id"))
    return Header(
        version=Version(
            block=api_to_small_int(assert_not_empty(version.get("block"))),
            app=api_to_small_int(version.get("app") or 0),
        ),
        chain_id=assert_not_empty(assert_string(_require(header, "chain_id"))),
        height=api_to_small_int(assert_not_empty(_require(header, "height"))),
        time=from_rfc3339_with_nanoseconds(_require(header, "time")),
        # empty for the first block
        last_block_id=decode_block_id(last_block_id) if last_block_id.get("hash") else None,
        last_commit_hash=from_hex(_require(header, "last_commit_hash")),
        data_hash=from_hex(_require(header, "data_hash")),
        validators_hash=from_hex(_require(header, "validators_hash")),
        next_validators_hash=from_hex(_require(header, "next_validators_hash")),
        consensus_hash=from_hex(_require(header, "consensus_hash")),
        app_hash=from_hex(_require(header, "app_hash")),
        last_results_hash=from_hex(_require(header, "last_results_hash")),
        evidence_hash=from_hex(_require(header, "evidence_hash")),
        proposer_address=from_hex(_require(header, "proposer_address")),
    )


def decode_commit_signature(data: Any) -> CommitSignature:
    signature = assert_object(data)
    return CommitSignature(
        block_id_flag=assert_number(_require(signature, "block_id_flag")),
        validator_address=from_hex(signature["validator_address"]) if signature.get("validator_address") else None,
        timestamp=may(from_rfc3339_with_nanoseconds, signature.get("timestamp")),
        signature=from_base64(signature["signature"]) if signature.get("signature") else None,
    )


def decode_commit(data: Any) -> Commit:
    commit = assert_object(data)
    return Commit(
        block_id=decode_block_id(_require(commit, "block_id")),
        height=api_to_small_int(assert_not_empty(_require(commit, "height"))),
        round=api_to_small_int(_require(commit, "round")),
        signatures=[decode_commit_signature(s) for s in assert_array(commit.get("signatures") or [])],
    )


def decode_block(data: Any) -> Block:
    block = assert_object(data)
    last_commit = block.get("last_commit")
    has_last_commit = (
        isinstance(last_commit, dict)
        and isinstance(last_commit.get("block_id"), dict)
        and bool(last_commit["block_id"].get("hash"))
    )
    block_data = assert_object(block.get("data") or {})
    evidence = assert_object(block.get("evidence") or {})
    return Block(
        header=decode_header(_require(block, "header")),
        last_commit=decode_commit(last_commit) if has_last_commit else None,
        txs=[from_base64(tx) for tx in assert_array(block_data.get("txs") or [])],
        evidence=list(assert_array(evidence.get("evidence") or [])),
    )


# ============ Validators / status ============


def decode_validator(data: Any) -> Validator:
    validator = assert_object(data)
    return Validator(
        address=from_hex(_require(validator, "address")),
        pubkey=may(decode_pubkey, validator.get("pub_key")),
        voting_power=api_to_big_int(_require(validator, "voting_power")),
        proposer_priority=may(api_to_small_int, validator.get("proposer_priority")),
    )


def decode_node_info(data: Any) -> NodeInfo:
    node_info = assert_object(data)
    protocol_version = assert_object(_require(node_info, "protocol_version"))
    other = assert_object(node_info.get("other") or {})
    return NodeInfo(
        id=from_hex(_require(node_info, "id")),
        listen_addr=assert_string(_require(node_info, "listen_addr")),
        network=assert_not_empty(assert_string(_require(node_info, "network"))),
        version=assert_string(_require(node_info, "version")),
        channels=assert_string(_require(node_info, "channels")),
        moniker=assert_string(_require(node_info, "moniker")),
        protocol_version=ProtocolVersion(
            p2p=api_to_small_int(_require(protocol_version, "p2p")),
            block=api_to_small_int(_require(protocol_version, "block")),
            app=api_to_small_int(_require(protocol_version, "app")),
        ),
        other={key: assert_string(value) for key, value in other.items()},
    )


def decode_sync_info(data: Any) -> SyncInfo:
    sync_info = assert_object(data)
    return SyncInfo(
        latest_block_hash=from_hex(_require(sync_info, "latest_block_hash")),
        latest_app_hash=from_hex(_require(sync_info, "latest_app_hash")),
        latest_block_height=api_to_small_int(_require(sync_info, "latest_block_height")),
        latest_block_time=from_rfc3339_with_nanoseconds(_require(sync_info, "latest_block_time")),
        catching_up=assert_boolean(_require(sync_info, "catching_up")),
        earliest_block_height=may(api_to_small_int, sync_info.get("earliest_block_height")),
    )


# ============ Response decoders ============


class Tendermint37Responses:
    """Response decoders for Tendermint 0.37 nodes."""

    @classmethod
    def decode_block(cls, response: JsonRpcSuccessResponse) -> BlockResponse:
        result = assert_object(response.result)
        return BlockResponse(
            block_id=decode_block_id(_require(result, "block_id")),
            block=decode_block(_require(result, "block")),
        )

    @classmethod
    def decode_block_results(cls, response: JsonRpcSuccessResponse) -> BlockResultsResponse:
        result = assert_object(response.result)
        return BlockResultsResponse(
            height=api_to_small_int(assert_not_empty(result.get("height"))),
            results=[decode_tx_data(tx) for tx in assert_array(result.get("txs_results") or [])],
            validator_updates=[
                decode_validator_update(update)
                for update in assert_array(result.get("validator_updates") or [])
            ],
            consensus_updates=may(decode_consensus_params, result.get("consensus_param_updates")),
            begin_block_events=decode_events(result.get("begin_block_events") or []),
            end_block_events=decode_events(result.get("end_block_events") or []),
        )

    @classmethod
    def decode_validators(cls, response: JsonRpcSuccessResponse) -> ValidatorsResponse:
        result = assert_object(response.result)
        return ValidatorsResponse(
            block_height=api_to_small_int(assert_not_empty(result.get("block_height"))),
            validators=[decode_validator(v) for v in assert_array(_require(result, "validators"))],
            count=api_to_small_int(_require(result, "count")),
            total=api_to_small_int(_require(result, "total")),
        )

    @classmethod
    def decode_status(cls, response: JsonRpcSuccessResponse) -> StatusResponse:
        result = assert_object(response.result)
        return StatusResponse(
            node_info=decode_node_info(_require(result, "node_info")),
            sync_info=decode_sync_info(_require(result, "sync_info")),
            validator_info=decode_validator(_require(result, "validator_info")),
        )


class Comet38Responses(Tendermint37Responses):
    """Response decoders for CometBFT 0.38 nodes."""

    @classmethod
    def decode_block_results(cls, response: JsonRpcSuccessResponse) -> BlockResultsResponse:
        decoded = super().decode_block_results(response)
        app_hash = assert_object(response.result).get("app_hash")
        if not app_hash:
            return decoded
        # 0.38 nodes send app_hash base64 encoded here, unlike the hex in headers
        return replace(decoded, app_hash=from_base64(app_hash))


@dataclass(frozen=True)
class Adaptor:
    params: type[Params]
    responses: type[Tendermint37Responses]


ADAPTORS: dict[CometVersion, Adaptor] = {
    CometVersion.TENDERMINT_37: Adaptor(params=Params, responses=Tendermint37Responses),
    CometVersion.COMET_38: Adaptor(params=Params, responses=Comet38Responses),
}


def adaptor_for(version: CometVersion) -> Adaptor:
    return ADAPTORS[CometVersion(version)]
