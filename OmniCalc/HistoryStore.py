# HistoryStore.py
"""""
Calculation history for OmniCalc.

Responsibilities
----------------
- Keep the newest-first list of past calculations in memory (max. 50 entries)
- Persist the whole list under one key of a small key-value storage
- Load it again at startup; missing or corrupt data simply means "no history"

Storage failures never reach the user: the in-memory list stays authoritative
for the session and the error is only printed in debug mode.
"""""

import json
import time
import uuid
from pathlib import Path

from . import config_manager as config_manager
from . import error as E

HISTORY_KEY = "calc_history"
MAX_ENTRIES = 50


class HistoryEntry:
    """One past calculation. Equality is by value so reloaded entries compare equal."""

    __slots__ = ("id", "expression", "result", "timestamp")

    def __init__(self, id, expression, result, timestamp):
        self.id = id
        self.expression = expression
        self.result = result
        self.timestamp = timestamp

    @classmethod
    def create(cls, expression, result):
        return cls(
            id=uuid.uuid4().hex,
            expression=expression,
            result=result,
            timestamp=int(time.time() * 1000),
        )

    @classmethod
    def from_dict(cls, data):
        """Build an entry from its stored form; raises PersistenceError if it doesn't fit."""
        if not isinstance(data, dict):
            raise E.PersistenceError("History entry is not an object.", code="5002")
        try:
            id, expression, result, timestamp = (data["id"], data["expression"],
                                                 data["result"], data["timestamp"])
        except KeyError as e:
            raise E.PersistenceError(f"History entry misses field {e}.", code="5002")

        if not all(isinstance(value, str) for value in (id, expression, result)):
            raise E.PersistenceError("History entry has non-text fields.", code="5002")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise E.PersistenceError("History entry has an invalid timestamp.", code="5002")

        return cls(id, expression, result, timestamp)

    def to_dict(self):
        return {
            "id": self.id,
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp,
        }

    def __eq__(self, other):
        if not isinstance(other, HistoryEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"HistoryEntry({self.expression!r} = {self.result!r})"


class JsonFileStorage:
    """Key-value storage kept as one JSON object in a file (like a browser's localStorage)."""

    def __init__(self, path):
        self.path = Path(path)

    def _read_all(self):
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            raise E.PersistenceError(f"Storage file is corrupt: {e}", code="5002")
        except OSError as e:
            raise E.PersistenceError(f"Storage could not be read: {e}", code="5000")

        if not isinstance(data, dict):
            raise E.PersistenceError("Storage file does not hold an object.", code="5002")
        return data

    def _write_all(self, data):
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4)
        except OSError as e:
            raise E.PersistenceError(f"Storage could not be written: {e}", code="5001")

    def get_item(self, key):
        return self._read_all().get(key)

    def set_item(self, key, value):
        try:
            data = self._read_all()
        except E.PersistenceError as e:
            if e.code != "5002":
                raise
            data = {}  # Overwrite a corrupt file instead of failing forever
        data[key] = value
        self._write_all(data)

    def remove_item(self, key):
        try:
            data = self._read_all()
        except E.PersistenceError as e:
            if e.code != "5002":
                raise
            data = {}
        data.pop(key, None)
        self._write_all(data)


class HistoryStore:

    def __init__(self, storage=None, max_entries=MAX_ENTRIES):
        if storage is None:
            storage = JsonFileStorage(config_manager.history_path())
        self.storage = storage
        self.max_entries = max_entries
        self._entries = []
        self.debug = config_manager.is_debug()

    @property
    def entries(self):
        """Snapshot of the in-memory history, newest first."""
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    def load(self):
        """Read persisted history. Absent, unreadable or corrupt data yields []."""
        try:
            raw = self.storage.get_item(HISTORY_KEY)
            if raw is None:
                entries = []
            elif isinstance(raw, str):
                entries = self._decode(json.loads(raw))
            else:
                entries = self._decode(raw)
        except (E.PersistenceError, json.JSONDecodeError) as e:
            self._report(e)
            entries = []

        self._entries = entries[:self.max_entries]
        return list(self._entries)

    def append(self, expression, result):
        """Record a calculation as the newest entry and persist the list."""
        entry = HistoryEntry.create(expression, result)
        self._entries.insert(0, entry)
        del self._entries[self.max_entries:]
        self._persist()
        return entry

    def clear(self):
        self._entries = []
        try:
            self.storage.remove_item(HISTORY_KEY)
        except E.PersistenceError as e:
            self._report(e)

    @staticmethod
    def recall(entry):
        """Return (expression, result) for copying back into the display."""
        return entry.expression, entry.result

    def _decode(self, raw):
        if not isinstance(raw, list):
            raise E.PersistenceError("Stored history is not a list.", code="5002")
        return [HistoryEntry.from_dict(item) for item in raw]

    def _persist(self):
        try:
            self.storage.set_item(HISTORY_KEY, [entry.to_dict() for entry in self._entries])
        except E.PersistenceError as e:
            self._report(e)

    def _report(self, e):
        if self.debug == True:
            print(f"History storage error {e.code}: {e.message}")
