"""
Decoded RPC responses.

Instances are built fresh by the decoders in ``adaptor`` and are never
mutated afterwards; derive modified copies with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class EventAttribute:
    key: str
    value: str


@dataclass(frozen=True)
class Event:
    type: str
    attributes: list[EventAttribute] = field(default_factory=list)


@dataclass(frozen=True)
class TxData:
    code: int
    codespace: Optional[str] = None
    log: Optional[str] = None
    data: Optional[bytes] = None
    events: list[Event] = field(default_factory=list)
    gas_wanted: int = 0
    gas_used: int = 0


@dataclass(frozen=True)
class ValidatorPubkey:
    algorithm: str  # "ed25519" | "secp256k1"
    data: bytes


@dataclass(frozen=True)
class ValidatorUpdate:
    pubkey: Optional[ValidatorPubkey]
    voting_power: int


@dataclass(frozen=True)
class BlockParams:
    max_bytes: int
    max_gas: int


@dataclass(frozen=True)
class EvidenceParams:
    max_age_num_blocks: int
    max_age_duration: int


@dataclass(frozen=True)
class ConsensusParams:
    block: Optional[BlockParams] = None
    evidence: Optional[EvidenceParams] = None


@dataclass(frozen=True)
class BlockResultsResponse:
    height: int
    results: list[TxData] = field(default_factory=list)
    validator_updates: list[ValidatorUpdate] = field(default_factory=list)
    consensus_updates: Optional[ConsensusParams] = None
    begin_block_events: list[Event] = field(default_factory=list)
    end_block_events: list[Event] = field(default_factory=list)
    app_hash: Optional[bytes] = None


@dataclass(frozen=True)
class FinalizeBlockResultsResponse:
    """Block results with finalize-block events in their own field."""

    height: int
    results: list[TxData] = field(default_factory=list)
    validator_updates: list[ValidatorUpdate] = field(default_factory=list)
    consensus_updates: Optional[ConsensusParams] = None
    finalize_block_events: list[Event] = field(default_factory=list)
    app_hash: Optional[bytes] = None


@dataclass(frozen=True)
class PartSetHeader:
    total: int
    hash: bytes


@dataclass(frozen=True)
class BlockId:
    hash: bytes
    parts: PartSetHeader


@dataclass(frozen=True)
class Version:
    block: int
    app: int


@dataclass(frozen=True)
class Header:
    version: Version
    chain_id: str
    height: int
    time: datetime
    last_block_id: Optional[BlockId]
    last_commit_hash: bytes
    data_hash: bytes
    validators_hash: bytes
    next_validators_hash: bytes
    consensus_hash: bytes
    app_hash: bytes
    last_results_hash: bytes
    evidence_hash: bytes
    proposer_address: bytes


@dataclass(frozen=True)
class CommitSignature:
    block_id_flag: int
    validator_address: Optional[bytes]
    timestamp: Optional[datetime]
    signature: Optional[bytes]


@dataclass(frozen=True)
class Commit:
    block_id: BlockId
    height: int
    round: int
    signatures: list[CommitSignature] = field(default_factory=list)


@dataclass(frozen=True)
class Block:
    header: Header
    last_commit: Optional[Commit]
    txs: list[bytes] = field(default_factory=list)
    # Evidence is passed through undecoded.
    evidence: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class BlockResponse:
    block_id: BlockId
    block: Block


@dataclass(frozen=True)
class Validator:
    address: bytes
    pubkey: Optional[ValidatorPubkey]
    voting_power: int
    proposer_priority: Optional[int] = None


@dataclass(frozen=True)
class ValidatorsResponse:
    block_height: int
    validators: list[Validator]
    count: int
    total: int


@dataclass(frozen=True)
class ProtocolVersion:
    p2p: int
    block: int
    app: int


@dataclass(frozen=True)
class NodeInfo:
    id: bytes
    listen_addr: str
    network: str
    version: str
    channels: str
    moniker: str
    protocol_version: ProtocolVersion
    other: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SyncInfo:
    latest_block_hash: bytes
    latest_app_hash: bytes
    latest_block_height: int
    latest_block_time: datetime
    catching_up: bool
    earliest_block_height: Optional[int] = None


@dataclass(frozen=True)
class StatusResponse:
    node_info: NodeInfo
    sync_info: SyncInfo
    validator_info: Validator
