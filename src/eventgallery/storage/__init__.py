"""
Durable key/value backends for eventgallery.

- KeyValueStore: Interface shared by all backends
- InMemoryKeyValueStore: Process-local dict, used in tests
- FileKeyValueStore: One file per key
- DuckDBKeyValueStore: Single table in an embedded DuckDB file
"""

from .base import KeyValueStore
from .duckdb_store import DuckDBKeyValueStore
from .factory import build_key_value_store
from .file import FileKeyValueStore
from .memory import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "DuckDBKeyValueStore",
    "build_key_value_store",
]
