"""Exceptions raised by levelmap."""

from __future__ import annotations


class FieldStructureError(ValueError):
    """The field structure given to a map cannot describe a key."""
