#!/usr/bin/env python3
"""
CLI tool for reading and writing a Firebase database.

Usage:
    firebase-client --url https://my-project.firebaseio.com get users/alice
    firebase-client get users --order-by-key --limit-to-first 10
    firebase-client set users/alice '{"name": "Alice"}'
    firebase-client push messages '{"text": "hi"}'
    firebase-client update users/alice '{"age": 32}'
    firebase-client remove users/alice
    firebase-client rules-get
    firebase-client rules-set rules.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import simplejson
from colorama import Fore, Style, just_fix_windows_console

from . import query
from .client import get, get_rules_json, push, remove, set, set_rules_json, update
from .codec import decode
from .config import ClientConfig
from .errors import FirebaseError, UnmarshalError
from .ref import Ref


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def print_json(data: Any, indent: int = 2) -> None:
    """Print JSON keeping exact numbers."""
    print(simplejson.dumps(data, indent=indent, use_decimal=True, ensure_ascii=False))


def _parse_value(text: str) -> Any:
    try:
        return decode(text)
    except ValueError as e:
        raise UnmarshalError(e) from e


def _query_options(args) -> list[query.QueryOption]:
    options = []
    if args.order_by:
        options.append(query.order_by(args.order_by))
    if args.order_by_key:
        options.append(query.order_by_key())
    if args.order_by_value:
        options.append(query.order_by_value())
    if args.equal_to is not None:
        options.append(query.equal_to(_parse_value(args.equal_to)))
    if args.start_at is not None:
        options.append(query.start_at(_parse_value(args.start_at)))
    if args.end_at is not None:
        options.append(query.end_at(_parse_value(args.end_at)))
    if args.limit_to_first is not None:
        options.append(query.limit_to_first(args.limit_to_first))
    if args.limit_to_last is not None:
        options.append(query.limit_to_last(args.limit_to_last))
    if args.shallow:
        options.append(query.shallow())
    return options


def cmd_get(args, ref: Ref) -> int:
    print_json(get(ref.ref(args.path), *_query_options(args)))
    return 0


def cmd_set(args, ref: Ref) -> int:
    set(ref.ref(args.path), _parse_value(args.value))
    return 0


def cmd_push(args, ref: Ref) -> int:
    key = push(ref.ref(args.path), _parse_value(args.value))
    print(colorize(key, Fore.GREEN))
    return 0


def cmd_update(args, ref: Ref) -> int:
    update(ref.ref(args.path), _parse_value(args.value))
    return 0


def cmd_remove(args, ref: Ref) -> int:
    remove(ref.ref(args.path))
    return 0


def cmd_rules_get(args, ref: Ref) -> int:
    sys.stdout.write(get_rules_json(ref).decode("utf-8"))
    sys.stdout.write("\n")
    return 0


def cmd_rules_set(args, ref: Ref) -> int:
    set_rules_json(ref, Path(args.file).read_bytes())
    print(colorize("Rules updated", Fore.GREEN))
    return 0


COMMANDS = {
    "get": cmd_get,
    "set": cmd_set,
    "push": cmd_push,
    "update": cmd_update,
    "remove": cmd_remove,
    "rules-get": cmd_rules_get,
    "rules-set": cmd_rules_set,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firebase-client",
        description="CLI tool for a Firebase Realtime Database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--url", help="Database URL (default: $FIREBASE_URL)")
    parser.add_argument("--auth", help="Auth token (default: $FIREBASE_AUTH)")
    parser.add_argument("--config", help="YAML or JSON config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # get command
    get_parser = subparsers.add_parser("get", help="Read the value at a path")
    get_parser.add_argument("path", nargs="?", default="", help="Database path")
    get_parser.add_argument("--order-by", help="Order by a child key")
    get_parser.add_argument("--order-by-key", action="store_true", help="Order by key")
    get_parser.add_argument("--order-by-value", action="store_true", help="Order by value")
    get_parser.add_argument("--equal-to", help="JSON value to match")
    get_parser.add_argument("--start-at", help="JSON value to start at")
    get_parser.add_argument("--end-at", help="JSON value to end at")
    get_parser.add_argument("--limit-to-first", type=int, help="Return the first N children")
    get_parser.add_argument("--limit-to-last", type=int, help="Return the last N children")
    get_parser.add_argument("--shallow", action="store_true", help="Return keys only")

    # write commands
    for name, help_text in (
        ("set", "Replace the value at a path"),
        ("push", "Append a child with a generated key"),
        ("update", "Merge children into the value at a path"),
    ):
        write_parser = subparsers.add_parser(name, help=help_text)
        write_parser.add_argument("path", help="Database path")
        write_parser.add_argument("value", help="JSON value")

    remove_parser = subparsers.add_parser("remove", help="Delete the value at a path")
    remove_parser.add_argument("path", help="Database path")

    # rules commands
    subparsers.add_parser("rules-get", help="Print the security rules")
    rules_parser = subparsers.add_parser("rules-set", help="Replace the security rules")
    rules_parser.add_argument("file", help="JSON rules file")

    return parser


def _load_config(path: str | None) -> ClientConfig:
    if not path:
        return ClientConfig()
    if path.endswith((".yaml", ".yml")):
        return ClientConfig.from_yaml(path)
    return ClientConfig.from_json(path)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    just_fix_windows_console()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        ref = Ref(args.url, auth=args.auth, config=_load_config(args.config))
        return COMMANDS[args.command](args, ref)
    except FirebaseError as e:
        print(colorize(f"Error ({e.kind.value}): {e}", Fore.RED), file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
