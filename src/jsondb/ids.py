from __future__ import annotations

import uuid
from collections.abc import Callable

from .errors import InvalidIdError

IdGenerator = Callable[[], str]


def uuid_hex() -> str:
    return uuid.uuid4().hex


def uuid_str() -> str:
    return str(uuid.uuid4())


ID_GENERATORS: dict[str, IdGenerator] = {
    "hex": uuid_hex,
    "uuid": uuid_str,
}


def id_generator_for(name: str) -> IdGenerator:
    try:
        return ID_GENERATORS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown id format: {name}") from exc


def validate_entry_id(entry_id: str) -> str:
    """Reject identifiers that are not a single file name."""
    if not isinstance(entry_id, str) or not entry_id:
        raise InvalidIdError(entry_id, "must be a non-empty string")
    if entry_id in {".", ".."}:
        raise InvalidIdError(entry_id, "must not be a relative path marker")
    if any(char in entry_id for char in ("/", "\\", "\x00")):
        raise InvalidIdError(entry_id, "must not contain path separators")
    return entry_id
