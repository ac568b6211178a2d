from __future__ import annotations

import itertools

import pytest

from jsondb import Entry


class Note(Entry):
    title: str = ""
    body: str = ""
    tags: list[str] = []


@pytest.fixture
def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"note-{next(counter):03d}"
