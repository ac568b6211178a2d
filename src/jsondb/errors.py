from __future__ import annotations


class JsonDbError(Exception):
    """Base class for errors raised by jsondb itself."""


class NotFoundError(JsonDbError, LookupError):
    def __init__(self, entity_id: str) -> None:
        super().__init__(entity_id)
        self.entity_id = entity_id

    def __str__(self) -> str:
        return f"Entity not found #{self.entity_id}"


class InvalidIdError(JsonDbError, ValueError):
    def __init__(self, entity_id: object, reason: str) -> None:
        super().__init__(entity_id, reason)
        self.entity_id = entity_id
        self.reason = reason

    def __str__(self) -> str:
        return f"Invalid entry id {self.entity_id!r}: {self.reason}"


class ScannerStateError(JsonDbError, IndexError):
    """Raised when a scanner is read without a current position."""


def is_not_found(exc: BaseException | None) -> bool:
    return isinstance(exc, NotFoundError)
