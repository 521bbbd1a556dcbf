"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields


AUTH_PARAMS = ("auth", "access_token")


@dataclass
class ClientConfig:
    """
    Configuration for the firebase client.

    Can be set via:
    - Constructor arguments
    - Environment variables (FIREBASE_*)
    - Config file (YAML or JSON)
    """
    # Database URL, e.g. https://<project>.firebaseio.com
    url: str | None = field(
        default_factory=lambda: os.environ.get("FIREBASE_URL")
    )

    # Token attached to every request (database secret, ID token or OAuth2 token)
    auth: str | None = field(
        default_factory=lambda: os.environ.get("FIREBASE_AUTH")
    )

    # Query parameter carrying the token: "auth" or "access_token"
    auth_param: str = field(
        default_factory=lambda: os.environ.get("FIREBASE_AUTH_PARAM", "auth")
    )

    # Request timeout (seconds)
    timeout: float = field(
        default_factory=lambda: float(os.environ.get("FIREBASE_TIMEOUT", "30"))
    )

    user_agent: str = field(
        default_factory=lambda: os.environ.get("FIREBASE_USER_AGENT", "firebase-client/0.1.0")
    )

    def __post_init__(self) -> None:
        if self.auth_param not in AUTH_PARAMS:
            raise ValueError(
                f"auth_param must be one of {', '.join(AUTH_PARAMS)}, got {self.auth_param!r}"
            )
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_dict(cls, data: dict) -> ClientConfig:
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: str) -> ClientConfig:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> ClientConfig:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
