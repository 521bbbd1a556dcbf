"""Exceptions raised by the firebase client."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    MARSHAL = "marshal"         # Outgoing value could not be encoded
    TRANSPORT = "transport"     # Network call failed (DNS, connect, TLS, timeout)
    SERVER = "server"           # Non-2xx status from the store
    UNMARSHAL = "unmarshal"     # Body or raw input was not decodable


class FirebaseError(Exception):
    """Base exception for firebase client errors.

    ``str(err)`` is the single human-readable message; ``kind`` lets callers
    branch on the failure class without parsing it.
    """
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MarshalError(FirebaseError):
    """Failed to encode a value as JSON."""
    kind = ErrorKind.MARSHAL

    def __init__(self, cause: Exception):
        super().__init__(f"could not marshal json: {cause}")


class TransportError(FirebaseError):
    """Failed to execute the HTTP request."""
    kind = ErrorKind.TRANSPORT

    def __init__(self, cause: Exception):
        super().__init__(f"could not execute request: {cause}")


class UnmarshalError(FirebaseError):
    """Failed to decode JSON into the requested shape."""
    kind = ErrorKind.UNMARSHAL

    def __init__(self, cause: Exception):
        super().__init__(f"could not unmarshal json: {cause}")


class ServerError(FirebaseError):
    """The store answered with a non-2xx status.

    ``detail`` holds the parsed response body when it was valid JSON, else
    ``None``. Its layout is server-defined and treated as opaque.
    """
    kind = ErrorKind.SERVER

    def __init__(self, status_code: int, message: str, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
