"""JSON encoding and decoding with exact numbers.

Integers decode to ``int`` and everything else numeric to ``decimal.Decimal``,
so values beyond 53-bit precision or with long fractions survive a round trip.
"""

from __future__ import annotations

import dataclasses
from typing import Any

import simplejson
from pydantic import BaseModel


def _encode_default(value: Any) -> Any:
    """Fallback for types simplejson does not know."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="python")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode(value: Any) -> bytes:
    """Encode a value to compact JSON bytes.

    Raises:
        TypeError: value contains an unsupported type
        ValueError: value is circular or contains NaN/Infinity
    """
    text = simplejson.dumps(
        value,
        use_decimal=True,
        separators=(",", ":"),
        allow_nan=False,
        default=_encode_default,
    )
    return text.encode("utf-8")


def decode(raw: bytes | str) -> Any:
    """Decode JSON text, keeping numbers exact.

    Raises:
        simplejson.JSONDecodeError: raw is not a single valid JSON document
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    return simplejson.loads(raw, use_decimal=True)
