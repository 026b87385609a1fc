"""
In-process document collections.

Each record is a plain dict. The collection owns two keys on it: ``$id`` (assigned
on insert, never reused) and ``meta`` (``created``/``updated`` epoch milliseconds
and a ``revision`` counter). Records are copied on the way in and out.
"""

import copy
import time
from typing import Callable, Dict, Iterable, List, Optional

from .errors import StoreError

ID_KEY = "$id"
META_KEY = "meta"


def _now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class Collection:
    """A named set of records addressable by ``$id``."""

    def __init__(self, name: str, records: Iterable[Dict] = (), max_id: int = 0):
        self.name = name
        self.max_id = max_id
        self.dirty = False
        self._records: Dict[int, Dict] = {}

        for record in records:
            self._records[record[ID_KEY]] = copy.deepcopy(record)
            self.max_id = max(self.max_id, record[ID_KEY])

    def __len__(self):
        return len(self._records)

    def count(self) -> int:
        return len(self._records)

    def get(self, record_id) -> Optional[Dict]:
        """Get a copy of the record with the given id, or None."""
        try:
            record = self._records.get(int(record_id))
        except (TypeError, ValueError):
            return None
        return copy.deepcopy(record) if record is not None else None

    def insert(self, record: Dict) -> Dict:
        """Store a new record, assigning its id and creation metadata."""
        if record.get(ID_KEY) is not None:
            raise StoreError(f"Document is already in collection {self.name}, use update instead.")

        stored = copy.deepcopy(record)
        self.max_id += 1
        stored[ID_KEY] = self.max_id
        stored[META_KEY] = {"created": _now_ms(), "revision": 0}

        self._records[stored[ID_KEY]] = stored
        self.dirty = True
        return copy.deepcopy(stored)

    def update(self, record: Dict) -> Dict:
        """Replace a stored record, stamping the update time."""
        record_id = record.get(ID_KEY)
        if record_id not in self._records:
            raise StoreError(f"Trying to update a document not in collection {self.name}.")

        previous_meta = self._records[record_id].get(META_KEY, {})
        stored = copy.deepcopy(record)
        stored[META_KEY] = dict(previous_meta)
        stored[META_KEY]["updated"] = _now_ms()
        stored[META_KEY]["revision"] = previous_meta.get("revision", 0) + 1

        self._records[record_id] = stored
        self.dirty = True
        return copy.deepcopy(stored)

    def remove(self, record: Dict):
        """Remove a stored record."""
        record_id = record.get(ID_KEY)
        if record_id not in self._records:
            raise StoreError(f"Trying to remove a document not in collection {self.name}.")

        del self._records[record_id]
        self.dirty = True

    def scan(self, predicate: Callable[[Dict], bool]) -> List[Dict]:
        """Return copies of all records matching the predicate, in id order."""
        return [
            copy.deepcopy(record)
            for _, record in sorted(self._records.items())
            if predicate(record)
        ]

    def records(self) -> List[Dict]:
        """Return copies of all records, in id order."""
        return self.scan(lambda record: True)
