"""Poller service: one ReceiveMessage call per invocation."""

import logging

from sqs_reader.infrastructure.sqs_client import SQSClient
from sqs_reader.models.schemas import Batch
from sqs_reader.services.envelope import decode_poll_response

logger = logging.getLogger(__name__)


class Poller:
    """Receives a batch of messages from the queue."""

    def __init__(self, sqs_client: SQSClient, wait_time_seconds: int = 20, max_messages: int = 10):
        """
        Initialize poller.

        Args:
            sqs_client: SQSClient instance.
            wait_time_seconds: Long polling wait time in seconds.
            max_messages: Maximum number of messages per poll (1-10).
        """
        self._sqs_client = sqs_client
        self._wait_time_seconds = wait_time_seconds
        self._max_messages = max_messages

    def poll(self) -> Batch:
        """
        Issue one poll and decode the response.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response is malformed.
        """
        logger.debug("Polling start")
        content = self._sqs_client.receive_messages(
            wait_time_seconds=self._wait_time_seconds,
            max_messages=self._max_messages,
        )
        batch = decode_poll_response(content)
        logger.debug("Polling complete: %d message(s)", len(batch))
        return batch
