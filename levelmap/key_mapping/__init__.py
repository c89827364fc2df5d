"""Key codec and nested reconstruction utilities."""

from .codec import KeyCodec, escape, unescape
from .field_key import FieldKey
from .nested import build_nested


__all__ = ["FieldKey", "KeyCodec", "build_nested", "escape", "unescape"]
