"""Conversion between structured keys and their delimited string form."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Sequence


_logger = logging.getLogger(__name__)

SEGMENT_SEP = "/"
NAME_SEP = ":"
ESCAPE = "\\"

# Escapes are parked in the private use area while a key is split.
_ESCAPED_SEGMENT = "\ue000"
_ESCAPED_NAME = "\ue001"
_ESCAPED_ESCAPE = "\ue002"


def escape(text: str) -> str:
    """Escape backslashes and both separators so *text* can be embedded in a string key."""
    return (
        text.replace(ESCAPE, ESCAPE + ESCAPE)
        .replace(NAME_SEP, ESCAPE + NAME_SEP)
        .replace(SEGMENT_SEP, ESCAPE + SEGMENT_SEP)
    )


def unescape(text: str) -> str:
    """Reverse :func:`escape`."""
    return _restore_escapes(_hide_escapes(text))


def _hide_escapes(text: str) -> str:
    # Escaped backslashes go first so that "\\/" reads as a backslash then a separator.
    return (
        text.replace(ESCAPE + ESCAPE, _ESCAPED_ESCAPE)
        .replace(ESCAPE + SEGMENT_SEP, _ESCAPED_SEGMENT)
        .replace(ESCAPE + NAME_SEP, _ESCAPED_NAME)
    )


def _restore_escapes(text: str) -> str:
    return (
        text.replace(_ESCAPED_SEGMENT, SEGMENT_SEP)
        .replace(_ESCAPED_NAME, NAME_SEP)
        .replace(_ESCAPED_ESCAPE, ESCAPE)
    )


class KeyCodec:
    """Map between string keys and structured keys for an ordered field list.

    A structured key is a ``dict`` from field name to field value. The string
    form is a ``/`` separated list of segments, each either ``value`` (field
    taken from the segment position) or ``name:value``. A literal ``/``, ``:``
    or ``\\`` is written as ``\\/``, ``\\:`` or ``\\\\``.
    """

    def __init__(self, fields: Sequence[str]) -> None:
        super().__init__()
        self.fields = tuple(fields)

    def parse(self, key: Any) -> Any:
        """Convert a string key to a structured key.

        Fields missing from the string stay missing. Segments past the last
        declared field, and segments naming an undeclared field, are dropped.
        Mappings are copied with stringified values, keeping only declared
        fields whose value is not ``None``. Any other input is returned
        unchanged.
        """
        if isinstance(key, Mapping):
            return {field: str(key[field]) for field in self.fields if key.get(field) is not None}
        if not isinstance(key, str):
            return key

        parsed: dict[str, str] = {}
        for position, segment in enumerate(_hide_escapes(key).split(SEGMENT_SEP)):
            name, colon, value = segment.partition(NAME_SEP)
            if colon:
                field = _restore_escapes(name)
            elif position < len(self.fields):
                field, value = self.fields[position], segment
            else:
                _logger.debug("dropping positional segment %d of key %r: only %d fields", position, key, len(self.fields))
                continue

            if field not in self.fields:
                _logger.debug("dropping segment for undeclared field %r in key %r", field, key)
                continue
            parsed[field] = _restore_escapes(value)
        return parsed

    def format(self, key: Any, *, include_names: bool = True) -> Any:
        """Convert a structured key to its string form.

        Fields are emitted in declared order and absent fields are skipped.
        String keys are returned unchanged.
        """
        if not isinstance(key, Mapping):
            return key

        segments: list[str] = []
        for field in self.fields:
            if field not in key:
                continue
            value = escape(str(key[field]))
            segments.append(f"{escape(field)}{NAME_SEP}{value}" if include_names else value)
        return SEGMENT_SEP.join(segments)

    def with_defaults(self, key: Any, default: str) -> dict[str, str]:
        """Return the parsed *key* with every missing field set to *default*."""
        parsed = self.parse(key)
        return {field: parsed.get(field, default) for field in self.fields}
