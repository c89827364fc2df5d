"""Nested plain-dict construction from flattened key paths."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Iterable


def build_nested(items: Iterable[tuple[tuple[str, ...], Any]]) -> dict[str, Any]:
    """Build nested dicts from path/value pairs of equal depth.

    ``(("a", "b"), 1)`` and ``(("a", "c"), 2)`` become ``{"a": {"b": 1, "c": 2}}``.
    Paths keep their first-seen order at every level.
    """
    root: dict[str, Any] = {}
    depth: int | None = None
    for path, value in items:
        if not path:
            msg = "cannot nest a value under an empty path"
            raise ValueError(msg)
        if depth is None:
            depth = len(path)
        elif len(path) != depth:
            msg = f"path {path!r} does not have depth {depth}"
            raise ValueError(msg)

        node = root
        for segment in path[:-1]:
            node = node.setdefault(segment, {})
        node[path[-1]] = value
    return root
