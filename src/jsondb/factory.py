from __future__ import annotations

from .caching_store import cache
from .config import StoreConfig
from .file_store import FileStore
from .ids import id_generator_for
from .store import BaseStore


def open_store(config: StoreConfig | None = None) -> BaseStore:
    """Build the configured store, cached unless caching is disabled."""
    config = config or StoreConfig()
    store: BaseStore = FileStore(config.directory, new_id=id_generator_for(config.id_format))
    if config.caching.enabled:
        return cache(store)
    return store
