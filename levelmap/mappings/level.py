"""Multi-level map keyed by an ordered structure of named fields."""

from __future__ import annotations

import logging
import weakref
from functools import partial
from collections.abc import Iterator, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, override

from levelmap.errors import FieldStructureError
from levelmap.key_mapping import FieldKey, KeyCodec, build_nested

from .supplier import resolve


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


_logger = logging.getLogger(__name__)

Key = str | Mapping[str, Any]
"""A key in string form (``"A/b:B"``) or structured form (``{"a": "A", "b": "B"}``)."""

_MISSING = object()


def _field_names(structure: Sequence[str] | Mapping[str, Any]) -> tuple[str, ...]:
    if isinstance(structure, str):
        msg = "field structure must be a sequence or mapping of field names, not a string"
        raise FieldStructureError(msg)
    if isinstance(structure, Mapping):
        names = tuple(name for name, value in structure.items() if not callable(value))
    else:
        names = tuple(structure)

    if not names:
        msg = "field structure must declare at least one field"
        raise FieldStructureError(msg)
    for name in names:
        if not isinstance(name, str) or not name:
            msg = f"field names must be non-empty strings: {name!r}"
            raise FieldStructureError(msg)
    if len(set(names)) != len(names):
        msg = f"field names must be unique: {names!r}"
        raise FieldStructureError(msg)
    return names


class LevelMap(MutableMapping[FieldKey, Any]):
    """Map ``k1 -> k2 -> ... -> kn -> value`` for the fields ``k1..kn``.

    Every level indexes one field. The last level stores values and the
    others store child levels, created on first use. A partial key given to
    :meth:`select` returns the child level reached by following it. That
    sub-map shares its records with this map, and changes made through either
    one are seen by both, including the sizes of all enclosing levels.

    Missing fields in the keys given to :meth:`get`, :meth:`put` and
    :meth:`remove` take the ``default_field_value`` (``"_"`` unless given).
    """

    def __init__(
        self,
        fields: Sequence[str] | Mapping[str, Any],
        default_field_value: str = "_",
        *,
        _parent: LevelMap | None = None,
    ) -> None:
        """Create a map.

        Parameters
        ----------
        fields
            The key structure: field names in order, or a mapping whose
            non-callable entries name the fields in mapping order.
        default_field_value
            Value used for fields missing from a key.
        """
        super().__init__()
        self._fields = _field_names(fields)
        self._field = self._fields[0]
        self._is_leaf = len(self._fields) == 1
        self._default = str(default_field_value)
        self._codec = KeyCodec(self._fields)
        self._records: dict[str, Any] = {}
        self._size = 0
        self._parent = weakref.ref(_parent) if _parent is not None else None

    @classmethod
    def create(cls, fields: Sequence[str] | Mapping[str, Any], default_field_value: str = "_") -> LevelMap:
        """Create a top-level map with the given key structure."""
        return cls(fields, default_field_value)

    # -- keys -----------------------------------------------------------------

    def to_key(self, key: Key) -> dict[str, str]:
        """Return *key* in structured form, leaving missing fields out."""
        return self._normalize(key)

    def to_string_key(self, key: Key, *, include_names: bool = True) -> str:
        """Return *key* in string form, with field names unless ``include_names`` is false."""
        return self._codec.format(self._normalize(key), include_names=include_names)

    def _normalize(self, key: Key) -> dict[str, str]:
        parsed = self._codec.parse(key)
        if not isinstance(parsed, dict):
            msg = f"key must be a string or a mapping of field names to values, not {type(key).__name__}"
            raise TypeError(msg)
        return parsed

    # -- core operations ------------------------------------------------------

    def fields(self) -> tuple[str, ...]:
        """Return the field names indexed by this level and the levels below it."""
        return self._fields

    def size(self) -> int:
        """Return the number of values stored under this level."""
        return self._size

    def put(self, key: Key, value: Any) -> Any:
        """Associate *value* with *key* and return the value it replaced, if any."""
        return self._put(self._normalize(key), value)

    def _put(self, key: Mapping[str, str], value: Any) -> Any:
        slot = key.get(self._field, self._default)
        if not self._is_leaf:
            return self._child(slot)._put(key, value)

        previous = self._records.get(slot, _MISSING)
        self._records[slot] = value
        if previous is _MISSING:
            self._resize(1)
            return None
        return previous

    def select(self, key: Key, *, create: bool = True) -> Any:
        """Follow *key* as far as its leading fields go.

        Returns the sub-map reached when the key stops before the last field,
        or the stored value (``None`` when absent) for a full key. Only
        consecutive fields are followed: in ``select("a:A/c:C")`` the ``c``
        field is ignored because ``b`` is missing. Sub-maps missing along the
        path are created unless ``create`` is false, in which case ``None`` is
        returned.
        """
        return self._select(self._normalize(key), create=create)

    def _select(self, key: dict[str, str], *, create: bool) -> Any:
        slot = key.get(self._field)
        if slot is None:
            return self
        if self._is_leaf:
            return self._records.get(slot)

        child = self._records.get(slot)
        if child is None:
            if not create:
                return None
            child = self._child(slot)
        return child._select(key, create=create)

    def get(self, key: Key, default: Any = None) -> Any:
        """Return the value for *key*, or *default* when there is none.

        A :class:`~levelmap.mappings.supplier.Supplier` default is called with
        this map and its result is returned instead.
        """
        value = self._lookup(key)
        if value is _MISSING:
            return resolve(default, self)
        return value

    def get_or_else_update(self, key: Key, value: Any) -> Any:
        """Return the value for *key*, storing *value* first when there is none.

        *value* may be a :class:`~levelmap.mappings.supplier.Supplier`, which is
        only called on a miss. A computed ``None`` is returned without being
        stored.
        """
        existing = self._lookup(key)
        if existing is not _MISSING:
            return existing

        computed = resolve(value, self)
        if computed is not None:
            _ = self.put(key, computed)
        return computed

    def contains(self, key: Key) -> bool:
        """Return True when *key* has a value other than ``None``."""
        return self.get(key) is not None

    def remove(self, key: Key) -> Any:
        """Remove *key* and return its value, or ``None`` when it was absent."""
        full_key = self._codec.with_defaults(self._normalize(key), self._default)
        level = self._leaf_level(full_key)
        if level is None:
            return None

        previous = level._records.pop(full_key[level._field], _MISSING)
        if previous is _MISSING:
            return None
        level._resize(-1)
        return previous

    @override
    def clear(self) -> None:
        """Remove every value under this level, from enclosing maps too."""
        removed = self._size
        self._clear()
        _logger.debug("cleared %d entries from level %r", removed, self._field)

    remove_all = clear

    def _clear(self) -> None:
        for slot in list(self._records):
            if self._is_leaf:
                del self._records[slot]
                self._resize(-1)
            else:
                self._records[slot]._clear()

    def _lookup(self, key: Key) -> Any:
        full_key = self._codec.with_defaults(self._normalize(key), self._default)
        level = self._leaf_level(full_key)
        if level is None:
            return _MISSING
        return level._records.get(full_key[level._field], _MISSING)

    def _leaf_level(self, full_key: dict[str, str]) -> LevelMap | None:
        level = self
        while not level._is_leaf:
            level = level._records.get(full_key[level._field])
            if level is None:
                return None
        return level

    def _child(self, slot: str) -> LevelMap:
        child = self._records.get(slot)
        if child is None:
            child = LevelMap(self._fields[1:], self._default, _parent=self)
            self._records[slot] = child
            _logger.debug("created level %r under %s=%r", child._field, self._field, slot)
        return child

    def _resize(self, delta: int) -> None:
        level: LevelMap | None = self
        while level is not None:
            level._size += delta
            level = level._parent() if level._parent is not None else None

    # -- aggregates -----------------------------------------------------------

    def _entries(self, prefix: tuple[tuple[str, str], ...] = ()) -> Iterator[tuple[FieldKey, Any]]:
        for slot, entry in self._records.items():
            path = (*prefix, (self._field, slot))
            if self._is_leaf:
                yield FieldKey(path), entry
            else:
                yield from entry._entries(path)

    def each(self, func: Callable[..., Any], context: Any = None) -> None:
        """Call ``func(key, value, map)`` for every stored value.

        The keys hold one value per field of this map, so keys seen from a
        sub-map omit the fields of the prefix that selected it. When
        ``context`` is given it is passed as the first argument, the way a
        method receives ``self``. Entries are collected before the first call,
        so ``func`` may modify the map.
        """
        visit = func if context is None else partial(func, context)
        for key, value in list(self._entries()):
            visit(key, value, self)

    @override
    def keys(self, as_string: bool = False) -> list[Any]:  # type: ignore[override]
        """Return all keys, as :class:`FieldKey` objects or as strings with field names."""
        return [self._codec.format(key) if as_string else key for key, _ in self._entries()]

    @override
    def values(self) -> list[Any]:  # type: ignore[override]
        """Return all stored values."""
        return [value for _, value in self._entries()]

    def filter(self, predicate: Callable[..., Any], context: Any = None) -> LevelMap:
        """Return a new, independent map of the entries accepted by ``predicate(key, value, map)``.

        ``context`` is passed first when given, as in :meth:`each`.
        """
        accept = predicate if context is None else partial(predicate, context)
        result = LevelMap(self._fields, self._default)
        for key, value in self._entries():
            if accept(key, value, self):
                _ = result._put(key, value)
        return result

    def to_dict(self) -> dict[str, Any]:
        """Return a detached nested-dict snapshot, one level per field."""
        return build_nested((tuple(key[field] for field in self._fields), value) for key, value in self._entries())

    # -- mapping protocol -----------------------------------------------------

    @override
    def __getitem__(self, key: Key) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            raise KeyError(key)
        return value

    @override
    def __setitem__(self, key: Key, value: Any) -> None:
        _ = self.put(key, value)

    @override
    def __delitem__(self, key: Key) -> None:
        if self._lookup(key) is _MISSING:
            raise KeyError(key)
        _ = self.remove(key)

    @override
    def __iter__(self) -> Iterator[FieldKey]:
        """Iterate keys as :class:`FieldKey` objects, in insertion order per level."""
        for key, _ in self._entries():
            yield key

    @override
    def __len__(self) -> int:
        return self._size

    @override
    def __repr__(self) -> str:
        return repr(self.to_dict())
