"""Tests for the wrapped Tendermint client and version detection."""

from __future__ import annotations

import pytest

from seicomet.tendermint.adaptor import Comet38Responses, CometVersion
from seicomet.tendermint.client import (
    TendermintClient,
    UnsupportedVersionError,
    detect_version,
    version_from_node,
)


class TestVersionFromNode:
    @pytest.mark.parametrize(
        ("node_version", "expected"),
        [
            ("0.37.2", CometVersion.TENDERMINT_37),
            ("0.37.0-rc1", CometVersion.TENDERMINT_37),
            ("0.38.6", CometVersion.COMET_38),
            ("1.0.0", CometVersion.COMET_38),
        ],
    )
    def test_supported(self, node_version: str, expected: CometVersion) -> None:
        assert version_from_node(node_version) is expected

    @pytest.mark.parametrize("node_version", ["0.34.27", "0.37", "", "v0.38.0"])
    def test_unsupported(self, node_version: str) -> None:
        with pytest.raises(UnsupportedVersionError):
            version_from_node(node_version)


class TestTendermintClient:
    @pytest.mark.asyncio
    async def test_create_binds_adaptor(self, fake_transport) -> None:
        client = await TendermintClient.create(fake_transport, CometVersion.COMET_38)
        assert client.version is CometVersion.COMET_38
        assert client.adaptor.responses is Comet38Responses

    @pytest.mark.asyncio
    async def test_block_results_ignores_finalize_events(self, fake_transport, fixture_loader) -> None:
        fake_transport.results["block_results"] = fixture_loader("block_results_finalize.json")
        client = await TendermintClient.create(fake_transport)

        results = await client.block_results(101)

        assert [e.type for e in results.end_block_events] == ["block_bloom"]

    @pytest.mark.asyncio
    async def test_validators_without_params(self, fake_transport) -> None:
        client = await TendermintClient.create(fake_transport)
        validators = await client.validators()
        assert fake_transport.requests[-1].params == {}
        assert validators.validators[0].voting_power == 1000

    @pytest.mark.asyncio
    async def test_disconnect_closes_transport(self, fake_transport) -> None:
        client = await TendermintClient.create(fake_transport)
        await client.disconnect()
        assert fake_transport.closed


class TestDetectVersion:
    @pytest.mark.asyncio
    async def test_detects_from_status(self, fake_transport) -> None:
        assert await detect_version(fake_transport) is CometVersion.TENDERMINT_37
        assert fake_transport.requests[-1].method == "status"

    @pytest.mark.asyncio
    async def test_rejects_old_nodes(self, fake_transport) -> None:
        fake_transport.results["status"]["node_info"]["version"] = "0.34.24"
        with pytest.raises(UnsupportedVersionError):
            await detect_version(fake_transport)
