from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Method(str, Enum):
    BLOCK = "block"
    BLOCK_RESULTS = "block_results"
    STATUS = "status"
    VALIDATORS = "validators"


@dataclass(frozen=True)
class BlockRequest:
    height: Optional[int] = None
    method: Method = Method.BLOCK


@dataclass(frozen=True)
class BlockResultsRequest:
    height: Optional[int] = None
    method: Method = Method.BLOCK_RESULTS


@dataclass(frozen=True)
class StatusRequest:
    method: Method = Method.STATUS


@dataclass(frozen=True)
class ValidatorsParams:
    height: Optional[int] = None
    page: Optional[int] = None
    per_page: Optional[int] = None


@dataclass(frozen=True)
class ValidatorsRequest:
    params: ValidatorsParams = ValidatorsParams()
    method: Method = Method.VALIDATORS
