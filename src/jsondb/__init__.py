"""JSON file-per-entry record store with an optional in-memory cache."""

from .caching_store import CachingStore, cache
from .config import CachingConfig, StoreConfig, load_config
from .entry import Document, Entry
from .errors import (
    InvalidIdError,
    JsonDbError,
    NotFoundError,
    ScannerStateError,
    is_not_found,
)
from .factory import open_store
from .file_store import FileStore
from .ids import IdGenerator, uuid_hex, uuid_str
from .scanner import Scanner, iter_entries, new_scanner
from .store import BaseStore

__all__ = [
    "BaseStore",
    "CachingConfig",
    "CachingStore",
    "Document",
    "Entry",
    "FileStore",
    "IdGenerator",
    "InvalidIdError",
    "JsonDbError",
    "NotFoundError",
    "Scanner",
    "ScannerStateError",
    "StoreConfig",
    "cache",
    "is_not_found",
    "iter_entries",
    "load_config",
    "new_scanner",
    "open_store",
    "uuid_hex",
    "uuid_str",
]
