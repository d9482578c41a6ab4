"""Message handler: decodes a polled batch and emits its records."""

import logging
from collections.abc import Callable

from sqs_reader.exceptions import RecordError
from sqs_reader.models.schemas import Batch, DecodedRecord, HandleResult
from sqs_reader.services.envelope import decode_message

logger = logging.getLogger(__name__)

Emit = Callable[[DecodedRecord], None]


class MessageHandler:
    """Applies the inner envelope decode to every message of a batch.

    By default the first malformed line aborts its message and the first
    failing message aborts the batch with a RecordError, so none of the
    batch's messages get acknowledged. ``skip_bad_lines`` keeps decoding the
    sibling lines of a bad line; ``isolate_messages`` keeps decoding the
    messages after a bad one and only withholds the bad message's receipt
    handle.
    """

    def __init__(self, skip_bad_lines: bool = False, isolate_messages: bool = False):
        self._skip_bad_lines = skip_bad_lines
        self._isolate_messages = isolate_messages

    def _handle_message(self, body: str, emit: Emit, result: HandleResult) -> None:
        """Emit one message's records; raises RecordError if the message fails."""
        for item in decode_message(body):
            if isinstance(item, RecordError):
                if self._skip_bad_lines and item.line is not None:
                    logger.warning("Skipping malformed line: %s", item)
                    result.errors.append(str(item))
                    continue
                raise item
            emit(item)
            result.records += 1

    def handle(self, batch: Batch, emit: Emit) -> HandleResult:
        """
        Decode a batch and emit each record in message then line order.

        Returns:
            HandleResult with the receipt handles that are safe to delete.

        Raises:
            RecordError: On the first failing message, unless messages are isolated.
        """
        logger.debug("Handling start: %d message(s)", len(batch))
        result = HandleResult()
        for index, (body, receipt_handle) in enumerate(batch.messages()):
            try:
                self._handle_message(body, emit, result)
            except RecordError as e:
                if not self._isolate_messages:
                    raise
                logger.warning("Message %d of batch failed: %s", index, e)
                result.errors.append(str(e))
                continue
            result.receipt_handles.append(receipt_handle)

        logger.debug("Handling complete: %d record(s)", result.records)
        return result
