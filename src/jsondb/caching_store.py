from __future__ import annotations

import logging
from enum import Enum

from .entry import Entry
from .store import BaseStore, TEntry

logger = logging.getLogger(__name__)


class IdSeed(Enum):
    UNSEEDED = "unseeded"
    SEEDED = "seeded"


class CachingStore(BaseStore):
    """In-memory cache in front of another store.

    The inner store stays the authority: every mutation goes to it first and
    the cache only changes once that call has succeeded. Assumes it is the
    only writer to the inner store for its lifetime; changes made by other
    processes are not noticed.
    """

    def __init__(self, inner: BaseStore) -> None:
        self._inner = inner
        self._entries: dict[str, Entry] = {}
        self._ids: dict[str, None] = {}
        self._seed = IdSeed.UNSEEDED

    @property
    def inner(self) -> BaseStore:
        return self._inner

    def create(self, entry: Entry) -> str:
        entry_id = self._inner.create(entry)

        self._entries[entry_id] = entry.snapshot()
        self._ids[entry_id] = None
        return entry_id

    def read(self, entry_id: str, entry: TEntry) -> TEntry:
        cached = self._entries.get(entry_id)
        if cached is not None:
            logger.debug("caching_store hit id=%s", entry_id)
            entry.copy_from(cached)
            return entry

        logger.debug("caching_store miss id=%s", entry_id)
        self._inner.read(entry_id, entry)

        self._entries[entry_id] = entry.snapshot()
        self._ids[entry_id] = None
        return entry

    def update(self, entry_id: str, entry: Entry) -> None:
        self._inner.update(entry_id, entry)

        self._entries[entry_id] = entry.snapshot()
        self._ids[entry_id] = None

    def delete(self, entry_id: str) -> None:
        self._inner.delete(entry_id)

        self._entries.pop(entry_id, None)
        self._ids.pop(entry_id, None)

    def list_ids(self) -> list[str]:
        if self._seed is IdSeed.UNSEEDED:
            seeded = self._inner.list_ids()
            for entry_id in seeded:
                self._ids.setdefault(entry_id, None)
            self._seed = IdSeed.SEEDED
            logger.info("caching_store seeded ids=%d known=%d", len(seeded), len(self._ids))

        return list(self._ids)

    def is_cached(self, entry_id: str) -> bool:
        return entry_id in self._entries

    def is_known(self, entry_id: str) -> bool:
        return entry_id in self._ids


def cache(inner: BaseStore) -> CachingStore:
    """Wrap ``inner`` in a fresh cache.

    Do not use when other processes write to the same backing directory.
    """
    return CachingStore(inner)
