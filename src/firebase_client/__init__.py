"""
Firebase Realtime Database client.

Reads and writes the JSON tree of a Firebase database over its REST API.

Usage:
    from firebase_client import Ref, order_by_key, limit_to_first

    db = Ref("https://my-project.firebaseio.com", auth="<token>")

    # Read (numbers keep full precision)
    users = db.ref("users").get(order_by_key(), limit_to_first(10))

    # Write
    db.ref("users/alice").set({"name": "Alice", "age": 31})
    db.ref("users/alice").update({"age": 32})
    key = db.ref("messages").push({"text": "hi"})
    db.ref(f"messages/{key}").remove()

    # Security rules
    raw = db.get_rules_json()
    db.set_rules_json(raw)

    # Functional API (also available)
    from firebase_client import get, set, push

    data = get(db / "users/alice")
"""

from .client import (
    # Executor
    do_request,
    # Convenience functions
    get,
    set,
    push,
    update,
    remove,
    set_rules,
    set_rules_json,
    get_rules_json,
    RULES_PATH,
)
from .config import ClientConfig
from .errors import (
    ErrorKind,
    FirebaseError,
    MarshalError,
    TransportError,
    ServerError,
    UnmarshalError,
)
from .query import (
    QueryOption,
    SERVER_TIMESTAMP,
    order_by,
    order_by_key,
    order_by_value,
    order_by_priority,
    equal_to,
    start_at,
    end_at,
    limit_to_first,
    limit_to_last,
    shallow,
    print_pretty,
    print_silent,
    format_export,
    timeout,
    write_size_limit,
)
from .ref import Ref

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "Ref",
    "ClientConfig",
    # Executor and convenience functions
    "do_request",
    "get",
    "set",
    "push",
    "update",
    "remove",
    "set_rules",
    "set_rules_json",
    "get_rules_json",
    "RULES_PATH",
    # Query options
    "QueryOption",
    "SERVER_TIMESTAMP",
    "order_by",
    "order_by_key",
    "order_by_value",
    "order_by_priority",
    "equal_to",
    "start_at",
    "end_at",
    "limit_to_first",
    "limit_to_last",
    "shallow",
    "print_pretty",
    "print_silent",
    "format_export",
    "timeout",
    "write_size_limit",
    # Exceptions
    "ErrorKind",
    "FirebaseError",
    "MarshalError",
    "TransportError",
    "ServerError",
    "UnmarshalError",
]
