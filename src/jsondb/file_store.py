from __future__ import annotations

import logging
from pathlib import Path

from . import entry as entry_module
from .entry import Entry
from .errors import NotFoundError
from .ids import IdGenerator, uuid_hex, validate_entry_id
from .store import BaseStore, TEntry

logger = logging.getLogger(__name__)


class FileStore(BaseStore):
    """One JSON document per entry, stored as ``<directory>/<id>``."""

    def __init__(self, directory: str | Path, new_id: IdGenerator = uuid_hex) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        self.new_id = new_id

    def create(self, entry: Entry) -> str:
        entry_id = validate_entry_id(self.new_id())
        entry.assign_id(entry_id)
        entry.created(entry_module.now_utc())

        self._path(entry_id).write_text(entry.model_dump_json(), encoding="utf-8")
        logger.info("file_store create id=%s", entry_id)
        return entry_id

    def read(self, entry_id: str, entry: TEntry) -> TEntry:
        path = self._path(entry_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            logger.debug("file_store miss id=%s", entry_id)
            raise NotFoundError(entry_id) from exc

        entry.load_json(raw)
        entry.assign_id(entry_id)
        return entry

    def update(self, entry_id: str, entry: Entry) -> None:
        path = self._existing_path(entry_id)
        entry.assign_id(entry_id)
        entry.modified(entry_module.now_utc())

        path.write_text(entry.model_dump_json(), encoding="utf-8")
        logger.info("file_store update id=%s", entry_id)

    def delete(self, entry_id: str) -> None:
        path = self._path(entry_id)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(entry_id) from exc
        logger.info("file_store delete id=%s", entry_id)

    def list_ids(self) -> list[str]:
        return sorted(path.name for path in self.directory.iterdir() if path.is_file())

    def _path(self, entry_id: str) -> Path:
        return self.directory / validate_entry_id(entry_id)

    def _existing_path(self, entry_id: str) -> Path:
        path = self._path(entry_id)
        if not path.exists():
            raise NotFoundError(entry_id)
        return path
