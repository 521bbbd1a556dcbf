"""Query options that shape a request.

Each option is a callable applied to the request's query parameters in the
order given. Values are JSON-encoded because the store parses them as JSON
(``orderBy="$key"``, ``equalTo=5``).
"""

from __future__ import annotations

from typing import Any, Callable

from .codec import encode


QueryOption = Callable[[dict[str, str]], None]

# Placeholder the store replaces with its own clock (ms since epoch)
SERVER_TIMESTAMP: dict[str, str] = {".sv": "timestamp"}

WRITE_SIZE_LIMITS = ("tiny", "small", "medium", "large", "unlimited")


def _json(value: Any) -> str:
    return encode(value).decode("utf-8")


def _set(key: str, value: str) -> QueryOption:
    def apply(params: dict[str, str]) -> None:
        params[key] = value
    return apply


def order_by(field: str) -> QueryOption:
    """Order results by a child key."""
    if not field:
        raise ValueError("order_by field must not be empty")
    return _set("orderBy", _json(field))


def order_by_key() -> QueryOption:
    return _set("orderBy", _json("$key"))


def order_by_value() -> QueryOption:
    return _set("orderBy", _json("$value"))


def order_by_priority() -> QueryOption:
    return _set("orderBy", _json("$priority"))


def equal_to(value: Any) -> QueryOption:
    """Filter to children whose ordered value equals ``value``."""
    return _set("equalTo", _json(value))


def start_at(value: Any) -> QueryOption:
    return _set("startAt", _json(value))


def end_at(value: Any) -> QueryOption:
    return _set("endAt", _json(value))


def _limit(name: str, n: int) -> QueryOption:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {n!r}")
    return _set(name, str(n))


def limit_to_first(n: int) -> QueryOption:
    return _limit("limitToFirst", n)


def limit_to_last(n: int) -> QueryOption:
    return _limit("limitToLast", n)


def shallow() -> QueryOption:
    """Return only the keys of the children, with values truncated to true."""
    return _set("shallow", "true")


def print_pretty() -> QueryOption:
    return _set("print", "pretty")


def print_silent() -> QueryOption:
    """Ask the store to answer writes with 204 and no body."""
    return _set("print", "silent")


def format_export() -> QueryOption:
    """Include priority metadata in the response."""
    return _set("format", "export")


def timeout(seconds: float) -> QueryOption:
    """Server-side read timeout, sent in milliseconds."""
    if seconds <= 0:
        raise ValueError(f"timeout must be positive, got {seconds}")
    return _set("timeout", f"{int(seconds * 1000)}ms")


def write_size_limit(level: str) -> QueryOption:
    if level not in WRITE_SIZE_LIMITS:
        raise ValueError(
            f"write_size_limit must be one of {', '.join(WRITE_SIZE_LIMITS)}, got {level!r}"
        )
    return _set("writeSizeLimit", level)


def apply_options(options: tuple[QueryOption, ...] | list[QueryOption]) -> dict[str, str]:
    """Fold options, in order, into a fresh parameter mapping."""
    params: dict[str, str] = {}
    for option in options:
        option(params)
    return params
