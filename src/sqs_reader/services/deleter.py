"""Deleter service: acknowledges handled messages."""

import logging

from sqs_reader.infrastructure.sqs_client import SQSClient

logger = logging.getLogger(__name__)


class Deleter:
    """Deletes a batch of messages from the queue in one request."""

    def __init__(self, sqs_client: SQSClient):
        self._sqs_client = sqs_client

    def delete(self, receipt_handles: list[str]) -> None:
        """
        Delete messages by receipt handle.

        The request succeeds or fails as a whole; per-entry results in the
        response are not inspected.

        Raises:
            TransportError: If the request fails.
        """
        if not receipt_handles:
            return
        logger.debug("Deleting %d message(s)", len(receipt_handles))
        self._sqs_client.delete_messages(receipt_handles)
        logger.debug("Deleting complete")
