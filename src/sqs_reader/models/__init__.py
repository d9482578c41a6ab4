"""Models package."""

from sqs_reader.models.schemas import Batch, DecodedRecord, HandleResult

__all__ = ["Batch", "DecodedRecord", "HandleResult"]
