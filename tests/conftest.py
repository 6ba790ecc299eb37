import itertools

import pytest

from board import TaskStore
from storage import MemorySlots, Storage
from theme import Theme


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"task-{next(counter):04d}"


@pytest.fixture
def clock():
    return lambda: "2026-10-19T08:30:00.000Z"


@pytest.fixture
def store(id_factory, clock):
    return TaskStore(id_factory=id_factory, clock=clock)


@pytest.fixture
def storage():
    return Storage(MemorySlots())


@pytest.fixture
def plain_theme():
    return Theme(enabled=False)
