"""Envelope codec.

Two decode steps:

* the outer step turns a ReceiveMessage XML response into a :class:`Batch`;
* the inner step peels an SNS-style body (a JSON object whose ``Message``
  field holds newline-delimited JSON) into individual records.
"""

import json
import xml.etree.ElementTree as ET
from collections.abc import Iterator

from sqs_reader.exceptions import DecodeError, RecordError
from sqs_reader.models.schemas import Batch, DecodedRecord

ENVELOPE_FIELD = "Message"
CORRUPTED_ENVELOPE = "corrupted envelope"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def decode_poll_response(content: bytes) -> Batch:
    """
    Decode a ReceiveMessage response into a batch.

    Namespaces are ignored so both the current and legacy SQS namespaces parse.

    Raises:
        DecodeError: If the document is not a well-formed ReceiveMessageResponse
            or a message lacks its Body or ReceiptHandle.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DecodeError(f"Poll response is not valid XML: {e}") from e

    if _local_name(root.tag) != "ReceiveMessageResponse":
        raise DecodeError(f"Unexpected poll response root: {_local_name(root.tag)}")

    bodies = []
    receipt_handles = []
    for message in root.iterfind("{*}ReceiveMessageResult/{*}Message"):
        body = message.find("{*}Body")
        receipt_handle = message.find("{*}ReceiptHandle")
        if body is None or receipt_handle is None:
            raise DecodeError("Message without Body or ReceiptHandle in poll response")
        bodies.append(body.text or "")
        receipt_handles.append(receipt_handle.text or "")

    return Batch(bodies=bodies, receipt_handles=receipt_handles)


def _parse_line(line: str, number: int) -> DecodedRecord:
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise RecordError(f"Invalid JSON on line {number}: {e}", line=number) from e
    if not isinstance(record, dict):
        raise RecordError(
            f"Expected a JSON object on line {number}, got {type(record).__name__}",
            line=number,
        )
    return record


def decode_message(body: str) -> Iterator[DecodedRecord | RecordError]:
    """
    Decode one message body into its records.

    Yields a record per non-empty inner line, or a line-scoped RecordError for
    a line that is not a JSON object. A body that is not a JSON object with a
    string ``Message`` field yields a single ``corrupted envelope`` error and
    nothing else.
    """
    try:
        envelope = json.loads(body)
    except json.JSONDecodeError:
        envelope = None

    inner = envelope.get(ENVELOPE_FIELD) if isinstance(envelope, dict) else None
    if not isinstance(inner, str):
        yield RecordError(CORRUPTED_ENVELOPE)
        return

    for number, line in enumerate(inner.split("\n"), start=1):
        if not line:
            continue
        try:
            yield _parse_line(line, number)
        except RecordError as e:
            yield e


def decode_records(batch: Batch) -> Iterator[DecodedRecord | RecordError]:
    """Decode every body in the batch, in message order then line order."""
    for body in batch.bodies:
        yield from decode_message(body)
