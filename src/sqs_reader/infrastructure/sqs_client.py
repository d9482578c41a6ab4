"""SQS query API client: signed GET requests for receive/delete operations."""

import logging
import re
from typing import Any
from urllib.parse import quote, urlencode, urlsplit

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest

from sqs_reader.exceptions import TransportError

logger = logging.getLogger(__name__)

API_VERSION = "2012-11-05"
SIGNATURE_VERSION = "4"
SERVICE_NAME = "sqs"

_REGION_PATTERN = re.compile(r"^sqs[.-]([a-z0-9-]+)\.amazonaws\.com")


def region_from_endpoint(endpoint: str, default: str) -> str:
    """Extract the signing region from an ``sqs.<region>.amazonaws.com`` host."""
    host = urlsplit(endpoint).hostname or ""
    match = _REGION_PATTERN.match(host)
    return match.group(1) if match else default


class SQSClient:
    """Handles SQS operations over the query API."""

    def __init__(
        self,
        http_client: httpx.Client,
        endpoint: str,
        credentials: Any,
        region: str = "us-east-1",
    ):
        """
        Initialize SQS client wrapper.

        Args:
            http_client: Shared httpx client used for every request.
            endpoint: Queue URL, e.g. https://sqs.us-east-1.amazonaws.com/123/queue.
            credentials: botocore credentials used to sign requests.
            region: Fallback signing region when the endpoint host has none.
        """
        self._http = http_client
        self._endpoint = endpoint.rstrip("?")
        self._credentials = credentials
        self._region = region_from_endpoint(self._endpoint, region)

    @property
    def endpoint(self) -> str:
        """Get the queue endpoint URL."""
        return self._endpoint

    @property
    def region(self) -> str:
        """Get the region requests are signed for."""
        return self._region

    def _build_url(self, params: list[tuple[str, str]]) -> str:
        query = urlencode(params, quote_via=quote, safe="")
        return f"{self._endpoint}?{query}"

    def build_receive_query(self, wait_time_seconds: int, max_messages: int) -> str:
        """Build the ReceiveMessage request URL."""
        return self._build_url([
            ("Action", "ReceiveMessage"),
            ("AttributeName", "All"),
            ("MaxNumberOfMessages", str(max_messages)),
            ("SignatureVersion", SIGNATURE_VERSION),
            ("Version", API_VERSION),
            ("WaitTimeSeconds", str(wait_time_seconds)),
        ])

    def build_delete_query(self, receipt_handles: list[str]) -> str:
        """Build the DeleteMessageBatch request URL.

        Entries are numbered from 1 and get the id ``msg<n>``, which only has
        to be unique within the request.
        """
        params = [
            ("Action", "DeleteMessageBatch"),
            ("SignatureVersion", SIGNATURE_VERSION),
            ("Version", API_VERSION),
        ]
        for n, receipt_handle in enumerate(receipt_handles, start=1):
            params.append((f"DeleteMessageBatchRequestEntry.{n}.Id", f"msg{n}"))
            params.append((f"DeleteMessageBatchRequestEntry.{n}.ReceiptHandle", receipt_handle))
        return self._build_url(params)

    def _sign(self, url: str) -> dict[str, str]:
        request = AWSRequest(method="GET", url=url)
        SigV4Auth(self._credentials, SERVICE_NAME, self._region).add_auth(request)
        return dict(request.headers.items())

    def get(self, url: str) -> bytes:
        """
        Issue a signed GET request.

        Returns:
            Raw response body.

        Raises:
            TransportError: On connection failure or a non-2xx response.
        """
        try:
            response = self._http.get(url, headers=self._sign(url))
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {self._endpoint} failed: {e}") from e

        if response.is_error:
            raise TransportError(
                f"Queue endpoint returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response.content

    def receive_messages(self, wait_time_seconds: int, max_messages: int) -> bytes:
        """Receive up to ``max_messages`` messages with all attributes."""
        return self.get(self.build_receive_query(wait_time_seconds, max_messages))

    def delete_messages(self, receipt_handles: list[str]) -> bytes:
        """Delete a batch of messages by receipt handle."""
        return self.get(self.build_delete_query(receipt_handles))
