"""Unit tests for utils.py functions."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from seicomet.overrides import FinalizeBlockMode
from seicomet.tendermint.responses import Event, EventAttribute, FinalizeBlockResultsResponse
from seicomet.utils import dumps, to_jsonable, to_rfc3339


class TestToRfc3339:
    def test_utc_uses_z_suffix(self) -> None:
        assert to_rfc3339(datetime(2024, 1, 15, 10, 20, 30, tzinfo=timezone.utc)) == "2024-01-15T10:20:30Z"

    def test_offset_is_converted(self) -> None:
        value = datetime(2024, 1, 15, 12, 20, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_rfc3339(value) == "2024-01-15T10:20:30Z"


class TestToJsonable:
    def test_dataclasses_and_bytes(self) -> None:
        value = FinalizeBlockResultsResponse(
            height=5,
            finalize_block_events=[Event(type="t1", attributes=[EventAttribute(key="k", value="v")])],
            app_hash=b"\xab\xcd",
        )
        assert to_jsonable(value) == {
            "height": 5,
            "results": [],
            "validator_updates": [],
            "consensus_updates": None,
            "finalize_block_events": [{"type": "t1", "attributes": [{"key": "k", "value": "v"}]}],
            "app_hash": "abcd",
        }

    def test_enums(self) -> None:
        assert to_jsonable({"mode": FinalizeBlockMode.MERGE}) == {"mode": "merge"}

    def test_dumps_is_valid_json(self) -> None:
        assert json.loads(dumps(Event(type="t1"))) == {"type": "t1", "attributes": []}
