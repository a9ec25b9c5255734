from .adapter import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore
from .connection import PORTAL_KEY_PREFIX, get_engine
from .errors import CorruptCollectionError, StaleWriteError, StorageError
from .models import Base, StoredValue

__all__ = [
    "get_engine",
    "PORTAL_KEY_PREFIX",
    "Base",
    "StoredValue",
    "KeyValueStore",
    "SqlKeyValueStore",
    "MemoryKeyValueStore",
    "StorageError",
    "StaleWriteError",
    "CorruptCollectionError",
]
