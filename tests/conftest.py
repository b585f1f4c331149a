import json

import pytest

from OmniCalc import error as E
from OmniCalc.HistoryStore import HistoryStore


class MemoryStorage:
    """In-memory stand-in for the key-value storage; values are kept as JSON text."""

    def __init__(self):
        self.data = {}

    def get_item(self, key):
        value = self.data.get(key)
        return None if value is None else json.loads(value)

    def set_item(self, key, value):
        self.data[key] = json.dumps(value)

    def remove_item(self, key):
        self.data.pop(key, None)


class BrokenStorage:
    """Storage whose every access fails, like a full or missing disk."""

    def get_item(self, key):
        raise E.PersistenceError("disk gone", code="5000")

    def set_item(self, key, value):
        raise E.PersistenceError("quota exceeded", code="5001")

    def remove_item(self, key):
        raise E.PersistenceError("disk gone", code="5001")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def history(storage):
    return HistoryStore(storage=storage)
