from .envelope import decode_message, decode_poll_response, decode_records
from .deleter import Deleter
from .message_handler import MessageHandler
from .metrics import ReaderStats
from .poller import Poller
from .sink import JsonLinesSink, RecordBuffer

__all__ = [
    "decode_message",
    "decode_poll_response",
    "decode_records",
    "Deleter",
    "MessageHandler",
    "ReaderStats",
    "Poller",
    "JsonLinesSink",
    "RecordBuffer",
]
