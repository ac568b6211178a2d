from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING

from .errors import ScannerStateError

if TYPE_CHECKING:
    from .store import BaseStore, TEntry


class Scanner:
    """Forward-only cursor over a fixed list of entry ids.

    Usage::

        scanner = store.scanner()
        while scanner.scan():
            note = scanner.read(Note())

    The id list is captured once at construction, so ``length()`` does not
    change when entries are created or deleted during the scan. Reads go
    through the store and can raise NotFoundError if an entry was deleted
    after the scanner was built.
    """

    def __init__(self, store: BaseStore, ids: Iterable[str]) -> None:
        self._store = store
        self._ids = tuple(ids)
        self._length = len(self._ids)
        self._position = -1
        self._exhausted = False

    def scan(self) -> bool:
        if self._position < self._length - 1:
            self._position += 1
            return True
        self._exhausted = True
        return False

    @property
    def current_id(self) -> str:
        if self._position < 0 or self._exhausted:
            raise ScannerStateError("scanner has no current entry; call scan() first")
        return self._ids[self._position]

    def read(self, entry: TEntry) -> TEntry:
        return self._store.read(self.current_id, entry)

    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length


def new_scanner(store: BaseStore) -> Scanner:
    return Scanner(store, store.list_ids())


def iter_entries(store: BaseStore, factory: Callable[[], TEntry]) -> Iterator[TEntry]:
    scanner = new_scanner(store)
    while scanner.scan():
        yield scanner.read(factory())
