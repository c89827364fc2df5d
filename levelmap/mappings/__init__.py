"""Multi-level map implementation."""

from .level import Key, LevelMap
from .supplier import Supplier


__all__ = ["Key", "LevelMap", "Supplier"]
