"""Request executor and convenience functions."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .codec import decode, encode
from .errors import MarshalError, ServerError, TransportError, UnmarshalError
from .query import QueryOption
from .ref import Ref


logger = logging.getLogger(__name__)

# Security rules live at this child of the database root
RULES_PATH = "/.settings/rules"


class _PushResult(BaseModel):
    name: str


def do_request(
    method: str,
    ref: Ref,
    value: Any = None,
    into: Any = None,
    *options: QueryOption,
) -> Any:
    """
    Execute a request against ref, optionally sending value and decoding the
    response.

    Args:
        method: HTTP method (GET, PUT, POST, PATCH, DELETE)
        ref: Target location
        value: Value to send as the JSON body; None sends no body
        into: Shape to decode the response into. None skips decoding,
            Any returns the plain JSON tree, bytes returns the raw body,
            anything else is validated with pydantic.
        *options: Query options applied to the request

    Returns:
        The decoded response, or None when into is None

    Raises:
        MarshalError: value could not be encoded (no request is sent)
        TransportError: the request could not be executed
        ServerError: the store answered with a non-2xx status
        UnmarshalError: the response could not be decoded into the shape
    """
    body = None
    if value is not None:
        try:
            body = encode(value)
        except (TypeError, ValueError) as e:
            raise MarshalError(e) from e

    client, request = ref.client_and_request(method, body, *options)
    logger.debug(f"{request.method} {ref.url}")

    with client:
        try:
            response = client.send(request, stream=True)
        except httpx.RequestError as e:
            raise TransportError(e) from e

        try:
            try:
                raw = response.read()
            except httpx.RequestError as e:
                raise TransportError(e) from e

            _check_server_error(response, raw)

            if into is None:
                return None
            return _decode_into(raw, into, response.status_code)
        finally:
            response.close()


def _check_server_error(response: httpx.Response, raw: bytes) -> None:
    """Raise ServerError for any status outside 2xx."""
    if response.is_success:
        return

    status = response.status_code
    message = f"server returned status {status} {response.reason_phrase}".rstrip()
    detail = None
    if raw.strip():
        try:
            detail = decode(raw)
        except ValueError:
            detail = None
        else:
            if isinstance(detail, dict) and isinstance(detail.get("error"), str):
                message = detail["error"]
            else:
                message = f"{message}: {encode(detail).decode('utf-8')}"

    logger.warning(f"Request to {response.request.url.path} failed: {message}")
    raise ServerError(status, message, detail)


def _decode_into(raw: bytes, into: Any, status_code: int) -> Any:
    # print=silent writes and some deletes answer 204 with no body
    if status_code == 204 and not raw.strip():
        return None

    try:
        data = decode(raw)
    except ValueError as e:
        raise UnmarshalError(e) from e

    if into is bytes:
        return raw
    if data is None or into is Any or into is object:
        return data

    try:
        return TypeAdapter(into).validate_python(data)
    except ValidationError as e:
        raise UnmarshalError(e) from e


def get(ref: Ref, *options: QueryOption, into: Any = Any) -> Any:
    """
    Read the value stored at ref.

    Usage:
        profile = get(db / "users/alice")
        recent = get(db / "posts", order_by_key(), limit_to_last(10), into=dict[str, Post])
    """
    return do_request("GET", ref, None, into, *options)


def set(ref: Ref, value: Any) -> None:
    """Store value at ref, replacing whatever was there."""
    do_request("PUT", ref, value, None)


def push(ref: Ref, value: Any) -> str:
    """Append value as a new child of ref and return the generated key."""
    result = do_request("POST", ref, value, _PushResult)
    if result is None:
        raise UnmarshalError(ValueError("push response did not contain a name"))
    return result.name


def update(ref: Ref, value: Any) -> None:
    """Merge the children of value into ref."""
    do_request("PATCH", ref, value, None)


def remove(ref: Ref) -> None:
    """Delete the value stored at ref."""
    do_request("DELETE", ref, None, None)


def set_rules(ref: Ref, value: Any) -> None:
    """Replace the security rules."""
    do_request("PUT", ref.ref(RULES_PATH), value, None)


def set_rules_json(ref: Ref, raw: bytes | str) -> None:
    """
    Replace the security rules from JSON text.

    The text is parsed locally first so malformed rules never reach the
    server.
    """
    try:
        value = decode(raw)
    except ValueError as e:
        raise UnmarshalError(e) from e

    set_rules(ref, value)


def get_rules_json(ref: Ref) -> bytes:
    """Return the security rules exactly as the server sent them."""
    return do_request("GET", ref.ref(RULES_PATH), None, bytes)
