"""
Structural checks and value conversions for RPC payloads.

Every ``assert_*`` helper returns its input unchanged when it has the
expected shape and raises ``DecodingError`` otherwise.
"""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")

MAX_SAFE_INTEGER = 2**53 - 1

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


class DecodingError(ValueError):
    pass


def assert_string(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodingError(f"Value must be a string, got {type(value).__name__}")
    return value


def assert_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodingError(f"Value must be a boolean, got {type(value).__name__}")
    return value


def assert_number(value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodingError(f"Value must be an integer, got {type(value).__name__}")
    return value


def assert_array(value: Any) -> list[Any]:
    if not isinstance(value, list):
        raise DecodingError(f"Value must be an array, got {type(value).__name__}")
    return value


def assert_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodingError(f"Value must be an object, got {type(value).__name__}")
    return value


def assert_set(value: Optional[T]) -> T:
    if value is None:
        raise DecodingError("Value must not be null or missing")
    return value


def assert_not_empty(value: Any) -> Any:
    value = assert_set(value)
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        raise DecodingError("Value must not be empty")
    if isinstance(value, int) and not isinstance(value, bool) and value == 0:
        raise DecodingError("Value must not be zero")
    return value


def may(transform: Callable[[T], U], value: Optional[T]) -> Optional[U]:
    """Apply ``transform`` unless the value is null or missing."""
    return None if value is None else transform(value)


def api_to_big_int(value: Any) -> int:
    text = assert_string(value)
    if not re.fullmatch(r"-?\d+", text):
        raise DecodingError(f"Invalid integer string: {text!r}")
    return int(text)


def api_to_small_int(value: Any) -> int:
    if isinstance(value, str):
        number = api_to_big_int(value)
    else:
        number = assert_number(value)
    if abs(number) > MAX_SAFE_INTEGER:
        raise DecodingError(f"Integer out of safe range: {number}")
    return number


def small_int_to_api(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected int, got {type(value).__name__}")
    return str(value)


def from_base64(value: Any) -> bytes:
    text = assert_string(value)
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise DecodingError(f"Invalid base64: {text!r}") from exc


def from_hex(value: Any) -> bytes:
    text = assert_string(value)
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise DecodingError(f"Invalid hex: {text!r}") from exc


def from_rfc3339_with_nanoseconds(value: Any) -> datetime:
    """
    Parse an RFC 3339 timestamp as emitted by Go's time package.

    Go prints up to nine fractional digits; anything past microseconds is
    truncated.
    """
    text = assert_string(value)
    match = _RFC3339.match(text)
    if match is None:
        raise DecodingError(f"Invalid RFC 3339 timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    suffix = "+00:00" if offset == "Z" else offset
    try:
        parsed = datetime.fromisoformat(
            f"{year}-{month}-{day}T{hour}:{minute}:{second}.{micros:06d}{suffix}"
        )
    except ValueError as exc:
        raise DecodingError(f"Invalid RFC 3339 timestamp: {text!r}") from exc
    return parsed.astimezone(timezone.utc)
