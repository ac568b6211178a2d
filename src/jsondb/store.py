from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TypeVar

from .entry import Entry

if TYPE_CHECKING:
    from .scanner import Scanner

TEntry = TypeVar("TEntry", bound=Entry)


class BaseStore(ABC):
    """Record store keyed by generated identifiers.

    Implementations are not safe for concurrent use; callers sharing a store
    across threads must serialize access themselves.
    """

    @abstractmethod
    def create(self, entry: Entry) -> str:
        """Persist a new entry, stamping its id and creation time."""

    @abstractmethod
    def read(self, entry_id: str, entry: TEntry) -> TEntry:
        """Populate ``entry`` in place with the stored record and return it.

        Raises NotFoundError when no record exists for ``entry_id``.
        """

    @abstractmethod
    def update(self, entry_id: str, entry: Entry) -> None:
        """Overwrite an existing record, stamping its modification time."""

    @abstractmethod
    def delete(self, entry_id: str) -> None:
        """Remove an existing record."""

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Return the identifiers currently known to the store."""

    def scanner(self) -> Scanner:
        from .scanner import new_scanner

        return new_scanner(self)
