"""Unit tests for payload assertions and conversions."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from seicomet.tendermint.encodings import (
    DecodingError,
    api_to_big_int,
    api_to_small_int,
    assert_array,
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


class TestAssertions:
    """Tests for the assert_* helpers."""

    def test_assert_array(self) -> None:
        assert assert_array([1, 2]) == [1, 2]
        with pytest.raises(DecodingError, match="array"):
            assert_array("not-an-array")
        with pytest.raises(DecodingError):
            assert_array({"type": "t1"})

    def test_assert_object(self) -> None:
        assert assert_object({}) == {}
        with pytest.raises(DecodingError):
            assert_object([])

    def test_assert_string(self) -> None:
        assert assert_string("") == ""
        with pytest.raises(DecodingError):
            assert_string(None)

    def test_assert_number_rejects_bool(self) -> None:
        assert assert_number(2) == 2
        with pytest.raises(DecodingError):
            assert_number(True)

    def test_assert_not_empty(self) -> None:
        assert assert_not_empty("100") == "100"
        for value in ("", [], None, 0):
            with pytest.raises(DecodingError):
                assert_not_empty(value)

    def test_may(self) -> None:
        assert may(int, None) is None
        assert may(int, "7") == 7


class TestIntegers:
    """Tests for integer conversions."""

    def test_small_int_from_string_and_number(self) -> None:
        assert api_to_small_int("100") == 100
        assert api_to_small_int(100) == 100
        assert api_to_small_int("-1") == -1

    def test_small_int_out_of_range(self) -> None:
        with pytest.raises(DecodingError):
            api_to_small_int(str(2**53))

    def test_big_int(self) -> None:
        assert api_to_big_int("18446744073709551615") == 2**64 - 1
        with pytest.raises(DecodingError):
            api_to_big_int("12a")
        with pytest.raises(DecodingError):
            api_to_big_int(12)

    def test_small_int_to_api(self) -> None:
        assert small_int_to_api(100) == "100"
        with pytest.raises(TypeError):
            small_int_to_api("100")  # type: ignore[arg-type]


class TestBytes:
    """Tests for base64 and hex decoding."""

    def test_from_base64(self) -> None:
        assert from_base64("dHgx") == b"tx1"
        assert from_base64("") == b""
        with pytest.raises(DecodingError):
            from_base64("not base64!")

    def test_from_hex(self) -> None:
        assert from_hex("A0b1") == b"\xa0\xb1"
        assert from_hex("") == b""
        with pytest.raises(DecodingError):
            from_hex("xyz")


class TestTimestamps:
    """Tests for RFC 3339 parsing."""

    def test_nanoseconds_are_truncated(self) -> None:
        parsed = from_rfc3339_with_nanoseconds("2024-01-15T10:20:30.123456789Z")
        assert parsed == datetime(2024, 1, 15, 10, 20, 30, 123456, tzinfo=timezone.utc)

    def test_without_fraction(self) -> None:
        parsed = from_rfc3339_with_nanoseconds("2024-01-15T10:20:30Z")
        assert parsed == datetime(2024, 1, 15, 10, 20, 30, tzinfo=timezone.utc)

    def test_offset_is_normalized_to_utc(self) -> None:
        parsed = from_rfc3339_with_nanoseconds("2024-01-15T12:20:30.5+02:00")
        assert parsed == datetime(2024, 1, 15, 10, 20, 30, 500000, tzinfo=timezone.utc)

    def test_go_zero_time(self) -> None:
        parsed = from_rfc3339_with_nanoseconds("0001-01-01T00:00:00Z")
        assert parsed.year == 1

    @pytest.mark.parametrize("value", ["2024-01-15", "2024-13-01T00:00:00Z", "yesterday"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(DecodingError):
            from_rfc3339_with_nanoseconds(value)
