"""emo: find emoji by name, keyword, memo or a local language model."""

from .catalog import load_catalog, to_char
from .errors import ConfigurationError, EmoError, InvalidInput, IOFailure, SerializationError
from .memo import MemoStore

__version__ = "0.3.0"

__all__ = [
    "ConfigurationError",
    "EmoError",
    "IOFailure",
    "InvalidInput",
    "MemoStore",
    "SerializationError",
    "load_catalog",
    "to_char",
]
