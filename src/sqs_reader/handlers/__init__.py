"""Handlers package."""

from sqs_reader.handlers.reader import Reader, Signal

__all__ = ["Reader", "Signal"]
