from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import FormatChecker

JSONRPC_RESPONSE_SCHEMA = "jsonrpc.response.schema.json"


class SchemaValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path

    @staticmethod
    def discover_root(start: Path | None = None) -> Path:
        if start is None:
            start = Path(__file__).resolve().parent
        root = start / "v1"
        if root.is_dir():
            return root
        raise FileNotFoundError(f"Unable to locate schemas/v1 directory under {start}.")

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return _default_registry()

    def schema_path(self, schema_filename: str) -> Path:
        return self.schema_root / schema_filename

    def load_schema(self, schema_filename: str) -> dict[str, Any]:
        path = self.schema_path(schema_filename)
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        return _validator_for(self, schema_filename)

    def validate_instance(self, instance: Any, schema_filename: str) -> None:
        validator = self.validator_for(schema_filename)
        errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
        if errors:
            formatted = [self._format_error(err) for err in errors]
            raise SchemaValidationError(
                f"Schema validation failed for {schema_filename}.",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"


@lru_cache(maxsize=1)
def _default_registry() -> SchemaRegistry:
    return SchemaRegistry(schema_root=SchemaRegistry.discover_root())


# Every JSON-RPC response goes through here; build each validator once.
@lru_cache(maxsize=None)
def _validator_for(registry: SchemaRegistry, schema_filename: str) -> jsonschema.Validator:
    schema = registry.load_schema(schema_filename)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema, format_checker=FormatChecker())


__all__ = [
    "JSONRPC_RESPONSE_SCHEMA",
    "SchemaRegistry",
    "SchemaValidationError",
]
