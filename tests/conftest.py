"""Shared fixtures for taskboard tests."""

import pytest

from taskboard.storage import MemoryStorage, TaskRepository
from taskboard.store import TaskStore


class CountingStorage(MemoryStorage):
    """MemoryStorage that records how many times the blob was written"""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


class ScriptedRandom:
    """Stand-in rng returning a fixed sequence from randrange()"""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randrange(self, upper):
        self.calls.append(upper)
        return self.values.pop(0)


@pytest.fixture
def storage():
    return CountingStorage()


@pytest.fixture
def store(storage):
    return TaskStore(TaskRepository(storage))
