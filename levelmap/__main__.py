"""Interface for ``python -m levelmap``."""

from __future__ import annotations

import json
from argparse import ArgumentParser
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence

from ._version import version
from .errors import FieldStructureError
from .key_mapping import KeyCodec
from .mappings import LevelMap


__all__ = ["main"]


def _field_list(value: str) -> list[str]:
    return value.split(",")


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="levelmap", description="Convert keys of a multi-level map.")
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    commands = parser.add_subparsers(dest="command")

    parse_command = commands.add_parser("parse", help="print a string key as a JSON object")
    _ = parse_command.add_argument("--fields", type=_field_list, required=True, help="comma-separated field names")
    _ = parse_command.add_argument("--default", help="value for fields missing from the key")
    _ = parse_command.add_argument("key")

    format_command = commands.add_parser("format", help="print the string form of a key")
    _ = format_command.add_argument("--fields", type=_field_list, required=True, help="comma-separated field names")
    _ = format_command.add_argument("--no-names", dest="include_names", action="store_false")
    _ = format_command.add_argument("values", nargs="*", metavar="NAME=VALUE")
    return parser


def main(args: Sequence[str] | None = None) -> None:
    """Argument parser for the CLI."""
    parser = _build_parser()
    options = parser.parse_args(args)
    if options.command is None:
        parser.print_help()
        return

    try:
        level_map = LevelMap(options.fields)
    except FieldStructureError as error:
        parser.error(str(error))

    if options.command == "parse":
        key = level_map.to_key(options.key)
        if options.default is not None:
            key = KeyCodec(level_map.fields()).with_defaults(key, options.default)
        ordered = {field: key[field] for field in level_map.fields() if field in key}
        print(json.dumps(ordered))
        return

    structured: dict[str, str] = {}
    for item in options.values:
        name, equals, value = item.partition("=")
        if not equals:
            parser.error(f"expected NAME=VALUE, got {item!r}")
        structured[name] = value
    print(level_map.to_string_key(structured, include_names=options.include_names))


if __name__ == "__main__":
    main()
