"""Lazily computed default values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable

    from .level import LevelMap


@dataclass(frozen=True, slots=True)
class Supplier:
    """Wrap a function that computes a missing value on demand.

    Plain values passed as defaults are always used as they are, even when
    callable. Only a ``Supplier`` is invoked, with the level performing the
    lookup as its single argument.
    """

    func: Callable[[LevelMap], Any]

    def __call__(self, level: LevelMap) -> Any:
        return self.func(level)


def resolve(value: Any, level: LevelMap) -> Any:
    """Return *value*, or what it supplies when it is a :class:`Supplier`."""
    if isinstance(value, Supplier):
        return value(level)
    return value
