"""SQS reader: drains a queue, unwraps SNS-style envelopes, emits JSON records."""

__version__ = "0.1.0"
