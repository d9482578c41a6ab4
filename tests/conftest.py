"""Shared fixtures: a background reader runner and a wait helper."""

import threading
import time

import pytest

from helpers import GatedHandler, RecordingDeleter
from sqs_reader.handlers.reader import Reader
from sqs_reader.services.message_handler import MessageHandler


@pytest.fixture
def wait_for():
    """Poll a predicate until it holds or the timeout expires."""

    def _wait_for(predicate, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait_for


@pytest.fixture
def start_reader():
    """Run a Reader on a background thread; stopped at teardown."""
    started = []

    def _start(poller, deleter=None, handler=None, **kwargs):
        records = []
        reader = Reader(
            poller=poller,
            deleter=deleter or RecordingDeleter(),
            handler=handler or MessageHandler(),
            emit=records.append,
            **kwargs,
        )
        thread = threading.Thread(target=reader.start, daemon=True)
        thread.start()
        started.append((reader, thread, poller, handler))
        return reader, records

    yield _start

    for reader, thread, poller, handler in started:
        reader.stop()
        thread.join(timeout=2)
        poller.released.set()
        if isinstance(handler, GatedHandler):
            handler.proceed.set()
