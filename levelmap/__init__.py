"""levelmap - multi-level map keyed by an ordered structure of named fields"""

from ._version import version as __version__
from .errors import FieldStructureError
from .key_mapping import FieldKey, KeyCodec
from .mappings import LevelMap, Supplier


__all__ = [
    "FieldKey",
    "FieldStructureError",
    "KeyCodec",
    "LevelMap",
    "Supplier",
    "__version__",
]
