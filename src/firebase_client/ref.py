"""References to locations in the database."""

from __future__ import annotations

import dataclasses
import re
from typing import Any
from urllib.parse import quote, urlsplit

import httpx

from .config import ClientConfig
from .query import QueryOption, apply_options


METHODS = ("GET", "PUT", "POST", "PATCH", "DELETE")

# Characters the store rejects in keys
INVALID_KEY_PATTERN = re.compile(r"[#$\[\]\x00-\x1f\x7f]")


def split_path(path: str) -> tuple[str, ...]:
    """Split a slash separated path into validated segments."""
    segments = tuple(s for s in path.strip("/").split("/") if s)
    for segment in segments:
        if INVALID_KEY_PATTERN.search(segment):
            raise ValueError(f"Invalid key {segment!r} in path {path!r}")
        if len(segment.encode("utf-8")) > 768:
            raise ValueError(f"Key longer than 768 bytes in path {path!r}")
    return segments


class Ref:
    """
    A location in the database.

    Refs are immutable; navigating returns a new Ref sharing the base URL,
    configuration and transport of its parent.

    Usage:
        db = Ref("https://my-project.firebaseio.com", auth="<token>")
        users = db / "users"
        users.ref("alice/profile").get()
        key = users.push({"name": "bob"})
    """

    __slots__ = ("_base_url", "_segments", "_config", "_transport")

    def __init__(
        self,
        url: str | None = None,
        *,
        auth: str | None = None,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        config = config or ClientConfig()
        if auth is not None:
            config = dataclasses.replace(config, auth=auth)

        url = url or config.url
        if not url:
            raise ValueError("Database URL required (pass url or set FIREBASE_URL)")

        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Invalid database URL: {url}")

        path = parts.path
        if path.endswith(".json"):
            path = path[:-len(".json")]

        self._base_url = f"{parts.scheme}://{parts.netloc}"
        self._segments = split_path(path)
        self._config = config
        self._transport = transport

    @classmethod
    def _derive(cls, parent: Ref, segments: tuple[str, ...]) -> Ref:
        ref = cls.__new__(cls)
        ref._base_url = parent._base_url
        ref._segments = segments
        ref._config = parent._config
        ref._transport = parent._transport
        return ref

    # -- navigation ---------------------------------------------------------

    def ref(self, sub_path: str) -> Ref:
        """Child reference at a path relative to this one."""
        return Ref._derive(self, self._segments + split_path(sub_path))

    def __truediv__(self, sub_path: str) -> Ref:
        return self.ref(sub_path)

    @property
    def parent(self) -> Ref | None:
        """Parent reference, or None at the root."""
        if not self._segments:
            return None
        return Ref._derive(self, self._segments[:-1])

    @property
    def root(self) -> Ref:
        return Ref._derive(self, ())

    @property
    def key(self) -> str | None:
        """Last path segment, or None at the root."""
        return self._segments[-1] if self._segments else None

    @property
    def path(self) -> str:
        return "/" + "/".join(self._segments)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def url(self) -> str:
        """REST endpoint for this location."""
        quoted = "/".join(quote(s, safe="") for s in self._segments)
        return f"{self._base_url}/{quoted}.json"

    def __str__(self) -> str:
        return self._base_url + self.path

    def __repr__(self) -> str:
        return f"Ref({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return (self._base_url, self._segments) == (other._base_url, other._segments)

    def __hash__(self) -> int:
        return hash((self._base_url, self._segments))

    # -- request building ---------------------------------------------------

    def client_and_request(
        self,
        method: str,
        body: bytes | None = None,
        *options: QueryOption,
    ) -> tuple[httpx.Client, httpx.Request]:
        """
        Build an HTTP client and a prepared request for this location.

        Args:
            method: One of GET, PUT, POST, PATCH, DELETE
            body: Encoded JSON body, if any
            *options: Query options, applied in order

        Returns:
            (client, request); the caller owns the client and must close it
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported method: {method}")

        params = apply_options(options)
        if self._config.auth:
            params[self._config.auth_param] = self._config.auth

        headers = {
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
        }
        if body is not None:
            headers["Content-Type"] = "application/json"

        client = httpx.Client(timeout=self._config.timeout, transport=self._transport)
        request = client.build_request(
            method,
            self.url,
            params=params,
            headers=headers,
            content=body,
        )
        return client, request

    # -- operations ---------------------------------------------------------

    def get(self, *options: QueryOption, into: Any = Any) -> Any:
        """Read the value stored here. See ``client.get``."""
        from .client import get
        return get(self, *options, into=into)

    def set(self, value: Any) -> None:
        from .client import set
        set(self, value)

    def push(self, value: Any) -> str:
        """Append a child with a generated key and return the key."""
        from .client import push
        return push(self, value)

    def update(self, value: Any) -> None:
        from .client import update
        update(self, value)

    def remove(self) -> None:
        from .client import remove
        remove(self)

    def set_rules(self, value: Any) -> None:
        from .client import set_rules
        set_rules(self, value)

    def set_rules_json(self, raw: bytes | str) -> None:
        from .client import set_rules_json
        set_rules_json(self, raw)

    def get_rules_json(self) -> bytes:
        from .client import get_rules_json
        return get_rules_json(self)
