from __future__ import annotations

from datetime import datetime, timezone
from typing import Self

from pydantic import BaseModel, ConfigDict


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


class Entry(BaseModel):
    """Base record type for everything kept in a store.

    Subclasses add their own fields; the store only touches ``id`` and the two
    timestamps through the hooks below.
    """

    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None

    def assign_id(self, entry_id: str) -> None:
        self.id = entry_id

    def created(self, at: datetime) -> None:
        self.created_at = at

    def modified(self, at: datetime) -> None:
        self.modified_at = at

    def snapshot(self) -> Self:
        """Return the value a store would hand back after persisting this entry."""
        return type(self).model_validate_json(self.model_dump_json())

    def copy_from(self, other: Entry) -> None:
        """Populate this entry in place with the state of ``other``."""
        self.load_json(other.model_dump_json())

    def load_json(self, raw: str | bytes) -> None:
        self._adopt(type(self).model_validate_json(raw))

    def _adopt(self, fresh: Entry) -> None:
        object.__setattr__(self, "__dict__", fresh.__dict__)
        object.__setattr__(self, "__pydantic_extra__", fresh.__pydantic_extra__)
        object.__setattr__(self, "__pydantic_fields_set__", fresh.__pydantic_fields_set__)
        object.__setattr__(self, "__pydantic_private__", fresh.__pydantic_private__)


class Document(Entry):
    model_config = ConfigDict(extra="allow")
