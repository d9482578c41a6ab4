"""Output side of the reader: a bounded record buffer and a JSON-lines sink."""

import json
import logging
import queue
import sys
import threading
from typing import TextIO

from sqs_reader.exceptions import ReaderError
from sqs_reader.models.schemas import DecodedRecord

logger = logging.getLogger(__name__)


class RecordBuffer:
    """
    Bounded hand-off from handler tasks to the thread writing the sink.

    ``put`` blocks while the buffer is full, so a slow sink slows the
    handlers down instead of piling records up in memory. Once closed, a
    blocked or later ``put`` raises ReaderError so the batch is dropped
    and left for redelivery rather than acknowledged.
    """

    def __init__(self, maxsize: int = 100, put_timeout: float = 0.5):
        self._queue: queue.Queue[DecodedRecord] = queue.Queue(maxsize=maxsize)
        self._put_timeout = put_timeout
        self._closed = threading.Event()

    def put(self, record: DecodedRecord) -> None:
        while not self._closed.is_set():
            try:
                self._queue.put(record, timeout=self._put_timeout)
                return
            except queue.Full:
                continue
        raise ReaderError("Record buffer closed; record not written")

    def get(self, timeout: float | None = None) -> DecodedRecord:
        """Take the next record; raises queue.Empty when the timeout expires."""
        return self._queue.get(timeout=timeout)

    def close(self) -> None:
        self._closed.set()


class JsonLinesSink:
    """Serializes records to a text stream, one JSON document per line."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream or sys.stdout
        self._lock = threading.Lock()

    def write(self, record: DecodedRecord) -> bool:
        """Write a record; returns False if it cannot be serialized."""
        try:
            line = json.dumps(record, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Failed to serialize record: %s", e)
            return False

        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
        return True
