"""Immutable structured keys."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, override


if TYPE_CHECKING:
    from collections.abc import Iterable


class FieldKey(Mapping[str, str]):
    """Read-only, hashable mapping of field names to field values.

    Compares equal to any mapping with the same items, so
    ``FieldKey({"a": "1"}) == {"a": "1"}``, and can be used as a ``dict`` key.
    """

    __slots__ = ("_hash", "_items")

    def __init__(self, items: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        super().__init__()
        self._items: dict[str, str] = dict(items)
        self._hash: int | None = None

    @override
    def __getitem__(self, field: str) -> str:
        return self._items[field]

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    @override
    def __len__(self) -> int:
        return len(self._items)

    @override
    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._items.items()))
        return self._hash

    @override
    def __repr__(self) -> str:
        return f"FieldKey({self._items!r})"
