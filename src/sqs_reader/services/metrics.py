"""Thread-safe counters for every reader stage."""

import threading
from typing import Any

COUNTERS = (
    "polls",
    "poll_errors",
    "messages",
    "empty_polls",
    "records",
    "record_errors",
    "batches_handled",
    "batches_dropped",
    "deletes",
    "deleted_messages",
    "delete_errors",
)


class ReaderStats:
    """
    Counters shared by the reader's tasks.

    Use ``increment`` from any thread and ``snapshot`` to read a consistent copy.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counts = dict.fromkeys(COUNTERS, 0)

    def increment(self, name: str, amount: int = 1) -> None:
        if name not in self._counts:
            raise KeyError(f"Unknown counter: {name}")
        with self._lock:
            self._counts[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._counts[name]

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._counts)
