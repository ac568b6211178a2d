from __future__ import annotations

from typing import Any

import pytest
from pydantic import Field, ValidationError

from conftest import Note
from jsondb import CachingStore, Entry, FileStore, NotFoundError, cache


class Tagged(Entry):
    payload: Any = None
    secret: str = Field(default="", exclude=True)


class CountingStore(FileStore):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.reads = 0
        self.listings = 0

    def read(self, entry_id, entry):
        self.reads += 1
        return super().read(entry_id, entry)

    def list_ids(self):
        self.listings += 1
        return super().list_ids()


def test_cache_factory_returns_fresh_decorator(tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)

    assert isinstance(store, CachingStore)
    assert store.inner is inner
    assert not store.is_known("anything")


def test_read_after_create_is_served_from_memory(tmp_path) -> None:
    inner = CountingStore(tmp_path)
    store = cache(inner)
    note = Note(title="cached", tags=["t"])

    entry_id = store.create(note)
    target = Note()
    result = store.read(entry_id, target)

    assert result is target
    assert target == note
    assert target.id == entry_id
    assert target.created_at is not None
    assert inner.reads == 0


def test_read_miss_goes_to_inner_store_once(tmp_path) -> None:
    inner = CountingStore(tmp_path)
    entry_id = inner.create(Note(title="on disk"))
    store = cache(inner)

    first = store.read(entry_id, Note())
    second = store.read(entry_id, Note())

    assert first == second
    assert first.title == "on disk"
    assert inner.reads == 1
    assert store.is_cached(entry_id)
    assert store.is_known(entry_id)


def test_mutating_caller_object_does_not_leak_into_cache(tmp_path) -> None:
    store = cache(FileStore(tmp_path))
    note = Note(title="original")
    entry_id = store.create(note)

    note.title = "changed locally"
    loaded = store.read(entry_id, Note())
    loaded.tags.append("local")

    assert store.read(entry_id, Note()).title == "original"
    assert store.read(entry_id, Note()).tags == []


def test_update_then_read_returns_new_value(tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)
    entry_id = store.create(Note(title="v1"))

    store.update(entry_id, Note(title="v2"))

    cached = store.read(entry_id, Note())
    on_disk = inner.read(entry_id, Note())
    assert cached.title == "v2"
    assert cached == on_disk
    assert cached.modified_at is not None


def test_failed_update_leaves_cache_untouched(monkeypatch, tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)
    entry_id = store.create(Note(title="kept"))

    def fail_update(entry_id, entry):
        raise OSError("disk full")

    monkeypatch.setattr(inner, "update", fail_update)
    with pytest.raises(OSError, match="disk full"):
        store.update(entry_id, Note(title="rejected"))

    assert store.read(entry_id, Note()).title == "kept"
    assert store.is_known(entry_id)


def test_update_of_unknown_id_does_not_cache_anything(tmp_path) -> None:
    store = cache(FileStore(tmp_path))

    with pytest.raises(NotFoundError):
        store.update("ghost", Note(title="never stored"))

    assert not store.is_cached("ghost")
    assert not store.is_known("ghost")
    with pytest.raises(NotFoundError):
        store.read("ghost", Note())


def test_failed_delete_leaves_cache_untouched(monkeypatch, tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)
    entry_id = store.create(Note(title="still here"))

    def fail_delete(entry_id):
        raise PermissionError("read-only")

    monkeypatch.setattr(inner, "delete", fail_delete)
    with pytest.raises(PermissionError):
        store.delete(entry_id)

    assert store.is_cached(entry_id)
    assert store.is_known(entry_id)


def test_delete_drops_entry_and_id(tmp_path) -> None:
    store = cache(FileStore(tmp_path))
    entry_id = store.create(Note())

    store.delete(entry_id)

    assert not store.is_cached(entry_id)
    assert entry_id not in store.list_ids()
    with pytest.raises(NotFoundError) as excinfo:
        store.read(entry_id, Note())
    assert excinfo.value.entity_id == entry_id


def test_failed_create_leaves_cache_untouched(monkeypatch, tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)

    def fail_create(entry):
        raise OSError("no space")

    monkeypatch.setattr(inner, "create", fail_create)
    with pytest.raises(OSError):
        store.create(Note())

    assert store.list_ids() == []


def test_list_ids_seeds_once_and_merges_new_ids(tmp_path, sequential_ids) -> None:
    inner = CountingStore(tmp_path, new_id=sequential_ids)
    existing = inner.create(Note(title="existing"))
    store = cache(inner)

    first = store.list_ids()
    created = store.create(Note(title="new"))
    second = store.list_ids()

    assert first == [existing]
    assert set(second) == {existing, created}
    assert inner.listings == 1


def test_seeding_keeps_ids_known_before_first_listing(tmp_path, sequential_ids) -> None:
    inner = FileStore(tmp_path, new_id=sequential_ids)
    on_disk = inner.create(Note())
    store = cache(inner)
    created = store.create(Note())

    ids = store.list_ids()

    assert sorted(ids) == sorted([on_disk, created])
    assert len(ids) == 2


def test_failed_seeding_is_retried(monkeypatch, tmp_path) -> None:
    inner = FileStore(tmp_path)
    entry_id = inner.create(Note())
    store = cache(inner)

    def fail_listing():
        raise OSError("directory unavailable")

    monkeypatch.setattr(inner, "list_ids", fail_listing)
    with pytest.raises(OSError):
        store.list_ids()

    monkeypatch.undo()
    assert store.list_ids() == [entry_id]


def test_ids_deleted_behind_the_cache_stay_listed(tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)
    entry_id = store.create(Note())
    store.list_ids()

    (tmp_path / entry_id).unlink()

    assert entry_id in store.list_ids()


def test_cache_matches_direct_reads_after_mixed_operations(tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)

    first = store.create(Note(title="one"))
    second = store.create(Note(title="two"))
    third = store.create(Note(title="three"))
    store.update(second, Note(title="two, revised", tags=["edited"]))
    store.delete(third)

    for entry_id in [first, second]:
        assert store.read(entry_id, Note()) == inner.read(entry_id, Note())
    with pytest.raises(NotFoundError):
        inner.read(third, Note())
    assert sorted(store.list_ids()) == sorted(inner.list_ids())


def test_cached_value_matches_what_disk_returns(tmp_path) -> None:
    inner = FileStore(tmp_path)
    store = cache(inner)
    entry_id = store.create(Tagged(payload=(1, 2), secret="s"))

    cached = store.read(entry_id, Tagged())
    on_disk = inner.read(entry_id, Tagged())

    assert cached == on_disk
    assert cached.payload == [1, 2]
    assert cached.secret == ""

    store.update(entry_id, Tagged(payload={"k": (3,)}, secret="again"))
    assert store.read(entry_id, Tagged()) == inner.read(entry_id, Tagged())


def test_malformed_file_passes_through_without_caching(tmp_path) -> None:
    (tmp_path / "broken").write_text("{oops", encoding="utf-8")
    store = cache(FileStore(tmp_path))

    with pytest.raises(ValidationError):
        store.read("broken", Note())

    assert not store.is_cached("broken")
    assert not store.is_known("broken")


def test_failed_read_miss_caches_nothing(tmp_path) -> None:
    store = cache(FileStore(tmp_path))

    with pytest.raises(NotFoundError):
        store.read("ghost", Note())

    assert not store.is_cached("ghost")
    assert not store.is_known("ghost")


def test_delete_of_unknown_id_raises_not_found(tmp_path) -> None:
    store = cache(FileStore(tmp_path))

    with pytest.raises(NotFoundError) as excinfo:
        store.delete("ghost")

    assert excinfo.value.entity_id == "ghost"
    assert store.list_ids() == []
