"""Error types raised by the reader's collaborators."""


class ReaderError(Exception):
    """Base class for every error the reader handles at a task boundary."""


class TransportError(ReaderError):
    """Network or HTTP failure talking to the queue endpoint."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ReaderError):
    """Poll response does not match the ReceiveMessage schema."""


class RecordError(ReaderError):
    """Message body or one of its inner lines is malformed.

    ``line`` is the 1-based inner line number for a line-scoped failure and
    None when the envelope itself is unusable.
    """

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line
