"""Test helpers: envelope builders and scripted collaborators."""

import json
import threading
from xml.sax.saxutils import escape

from sqs_reader.models.schemas import Batch
from sqs_reader.services.message_handler import MessageHandler

SQS_NAMESPACE = "http://queue.amazonaws.com/doc/2012-11-05/"


def envelope(*records, raw_lines=()) -> str:
    """Build an SNS-style body whose Message holds one JSON line per record."""
    lines = [json.dumps(record) for record in records] + list(raw_lines)
    return json.dumps({"Type": "Notification", "Message": "\n".join(lines) + "\n"})


def poll_response(*messages: tuple[str, str], namespace: str | None = SQS_NAMESPACE) -> bytes:
    """Build a ReceiveMessageResponse document from (body, receipt_handle) pairs."""
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    parts = [f'<?xml version="1.0"?><ReceiveMessageResponse{xmlns}><ReceiveMessageResult>']
    for index, (body, receipt_handle) in enumerate(messages, start=1):
        parts.append(
            f"<Message><MessageId>id-{index}</MessageId>"
            f"<ReceiptHandle>{escape(receipt_handle)}</ReceiptHandle>"
            f"<MD5OfBody>0</MD5OfBody><Body>{escape(body)}</Body></Message>"
        )
    parts.append(
        "</ReceiveMessageResult><ResponseMetadata><RequestId>req-1</RequestId>"
        "</ResponseMetadata></ReceiveMessageResponse>"
    )
    return "".join(parts).encode("utf-8")


class ScriptedPoller:
    """Returns scripted batches (or raises scripted errors), then blocks.

    Once the script is exhausted each poll waits on ``released`` and returns
    an empty batch, so the reader sits idle instead of spinning.
    """

    def __init__(self, *script):
        self._script = list(script)
        self._calls = 0
        self._cond = threading.Condition()
        self.released = threading.Event()

    @property
    def calls(self) -> int:
        with self._cond:
            return self._calls

    def poll(self) -> Batch:
        with self._cond:
            self._calls += 1
            step = self._script.pop(0) if self._script else None
            self._cond.notify_all()
        if step is None:
            self.released.wait(timeout=5)
            return Batch()
        if isinstance(step, Exception):
            raise step
        return step

    def wait_for_calls(self, count: int, timeout: float = 2.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._calls >= count, timeout=timeout)


class RecordingDeleter:
    """Records every delete call; optionally fails each one."""

    def __init__(self, error: Exception | None = None):
        self.calls: list[list[str]] = []
        self.called = threading.Event()
        self._error = error

    def delete(self, receipt_handles: list[str]) -> None:
        self.calls.append(list(receipt_handles))
        self.called.set()
        if self._error:
            raise self._error


class GatedHandler(MessageHandler):
    """MessageHandler that blocks in handle() until ``proceed`` is set."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.entered = threading.Event()
        self.proceed = threading.Event()

    def handle(self, batch, emit):
        self.entered.set()
        self.proceed.wait(timeout=5)
        return super().handle(batch, emit)
