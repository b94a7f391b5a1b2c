"""
Pattern library components.

This package provides the store that merges the shipped built-in patterns
with user-authored ones, the loader for the built-in set, and the key-value
storage backends the user set is persisted to.
"""

from .builtins import default_builtin_patterns, load_builtin_patterns
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from .store import CUSTOM_CATEGORY, PatternLibrary

__all__ = [
    "CUSTOM_CATEGORY",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PatternLibrary",
    "default_builtin_patterns",
    "load_builtin_patterns",
]
