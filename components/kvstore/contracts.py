"""
KVStore Contracts & Ports

Project: kvstore-mock
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, JsonValue, TypeAdapter

# Closed recursive value model: null | bool | number | str | list | mapping
Value = JsonValue

value_adapter: TypeAdapter[JsonValue] = TypeAdapter(JsonValue, config=ConfigDict(allow_inf_nan=False))


def _ensure_finite(value: Any) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"non-finite number {value!r} is not JSON-representable")
    if isinstance(value, list):
        for item in value:
            _ensure_finite(item)
    elif isinstance(value, dict):
        for item in value.values():
            _ensure_finite(item)


def decode_value(raw: bytes) -> Value:
    """Parse a request body into a Value.

    NaN, Infinity and overflowing literals such as 1e400 are rejected: they have
    no JSON encoding, so storing them would make every later read of the key fail.
    """
    value = value_adapter.validate_json(raw)
    _ensure_finite(value)
    return value


# --------------------------
# Wire models
# --------------------------

class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class HealthResult(BaseModel):
    ok: bool = True


# --------------------------
# Ports (Protocols)
# --------------------------

@runtime_checkable
class KeyValueStorePort(Protocol):
    def create(self, key: str, value: Value) -> None:
        ...

    def upsert(self, key: str, value: Value) -> None:
        ...

    def read(self, key: str) -> Value:
        ...

    def delete(self, key: str) -> None:
        ...
