"""Reader: the control loop that pipelines polling, handling and deletion."""

import logging
import queue
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any

from sqs_reader.exceptions import ReaderError, RecordError
from sqs_reader.models.schemas import Batch, DecodedRecord
from sqs_reader.services.deleter import Deleter
from sqs_reader.services.message_handler import MessageHandler
from sqs_reader.services.metrics import ReaderStats
from sqs_reader.services.poller import Poller

logger = logging.getLogger(__name__)


class Signal(Enum):
    """Kinds of events the control loop reacts to."""

    POLL = "poll"
    BATCH = "batch"
    DELETE = "delete"
    SETTLED = "settled"
    QUIT = "quit"


class Reader:
    """
    Drains the queue with overlapping poll, handle and delete tasks.

    The control loop in :meth:`start` only reads its inbox and schedules work;
    every network call and every decode runs on the thread pool and reports
    back through the inbox. When a batch arrives, its handler task requests
    the next poll before decoding, so a slow handler never delays polling.

    Errors are logged and counted in :attr:`stats`, then dropped: a failed
    poll is not repeated, a failed batch is not deleted (the queue redelivers
    it after its visibility timeout), and a failed delete is not retried.

    ``max_inflight_polls`` bounds how many poll cycles may be running at
    once, where a cycle lasts from spawning the poll until its batch is
    handled, dropped or found empty. Triggers over the bound wait in the loop
    until a cycle settles. None means unbounded.
    """

    def __init__(
        self,
        poller: Poller,
        deleter: Deleter,
        handler: MessageHandler,
        emit: Callable[[DecodedRecord], None],
        stats: ReaderStats | None = None,
        max_workers: int = 16,
        max_inflight_polls: int | None = None,
    ):
        self._poller = poller
        self._deleter = deleter
        self._handler = handler
        self._emit = emit
        self.stats = stats or ReaderStats()
        self._max_workers = max_workers
        self._max_inflight_polls = max_inflight_polls

        self._inbox: queue.Queue[tuple[Signal, Any]] = queue.Queue()
        self._executor: ThreadPoolExecutor | None = None
        # Touched by the control loop only
        self._inflight_polls = 0
        self._parked_polls = 0

    def _send(self, signal: Signal, payload: Any = None) -> None:
        self._inbox.put((signal, payload))

    def stop(self) -> None:
        """Ask the control loop to exit; tasks already running are not cancelled."""
        self._send(Signal.QUIT)

    def start(self) -> None:
        """Run the control loop until :meth:`stop` is called."""
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="sqs-reader",
        )
        logger.info("Reader started")
        self._executor.submit(self._send, Signal.POLL)

        try:
            while True:
                signal, payload = self._inbox.get()
                if signal is Signal.QUIT:
                    break
                self._dispatch(signal, payload)
        finally:
            self._executor.shutdown(wait=False)
            logger.info("Reader stopped: %s", self.stats.snapshot())

    def _dispatch(self, signal: Signal, payload: Any) -> None:
        if signal is Signal.POLL:
            self._on_poll()
        elif signal is Signal.BATCH:
            self._on_batch(payload)
        elif signal is Signal.DELETE:
            self._executor.submit(self._delete_task, payload)
        elif signal is Signal.SETTLED:
            self._on_settled()

    def _on_poll(self) -> None:
        if self._max_inflight_polls is not None and self._inflight_polls >= self._max_inflight_polls:
            self._parked_polls += 1
            logger.debug("Poll limit reached, %d trigger(s) waiting", self._parked_polls)
            return
        self._inflight_polls += 1
        self._executor.submit(self._poll_task)

    def _on_batch(self, batch: Batch) -> None:
        if batch.is_empty:
            self.stats.increment("empty_polls")
            self._inflight_polls -= 1
            self._on_poll()
            return
        self.stats.increment("messages", len(batch))
        self._executor.submit(self._handle_task, batch)

    def _on_settled(self) -> None:
        self._inflight_polls -= 1
        if self._parked_polls:
            self._parked_polls -= 1
            self._on_poll()
        elif self._inflight_polls == 0:
            logger.warning("No poll in flight; reader is idle until restarted")

    def _poll_task(self) -> None:
        try:
            batch = self._poller.poll()
        except ReaderError as e:
            logger.error("Poll failed: %s", e)
            self.stats.increment("poll_errors")
            self._send(Signal.SETTLED)
            return
        except Exception as e:
            logger.error("Unexpected poll failure: %s", e, exc_info=True)
            self.stats.increment("poll_errors")
            self._send(Signal.SETTLED)
            return

        self.stats.increment("polls")
        self._send(Signal.BATCH, batch)

    def _emit_record(self, record: DecodedRecord) -> None:
        self._emit(record)
        self.stats.increment("records")

    def _handle_task(self, batch: Batch) -> None:
        # Request the next poll before decoding this batch
        self._send(Signal.POLL)
        try:
            result = self._handler.handle(batch, self._emit_record)
        except RecordError as e:
            logger.error("Dropping batch of %d message(s): %s", len(batch), e)
            self.stats.increment("record_errors")
            self.stats.increment("batches_dropped")
            return
        except ReaderError as e:
            logger.error("Dropping batch of %d message(s): %s", len(batch), e)
            self.stats.increment("batches_dropped")
            return
        except Exception as e:
            logger.error("Unexpected handling failure: %s", e, exc_info=True)
            self.stats.increment("batches_dropped")
            return
        finally:
            self._send(Signal.SETTLED)

        self.stats.increment("batches_handled")
        if not result.success:
            logger.warning(
                "Batch handled with %d error(s); %d of %d message(s) acknowledged",
                len(result.errors),
                len(result.receipt_handles),
                len(batch),
            )
            self.stats.increment("record_errors", len(result.errors))
        if result.receipt_handles:
            self._send(Signal.DELETE, result.receipt_handles)

    def _delete_task(self, receipt_handles: list[str]) -> None:
        try:
            self._deleter.delete(receipt_handles)
        except ReaderError as e:
            logger.error("Delete of %d message(s) failed: %s", len(receipt_handles), e)
            self.stats.increment("delete_errors")
            return
        except Exception as e:
            logger.error("Unexpected delete failure: %s", e, exc_info=True)
            self.stats.increment("delete_errors")
            return

        self.stats.increment("deletes")
        self.stats.increment("deleted_messages", len(receipt_handles))
