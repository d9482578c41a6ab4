"""Infrastructure package."""

from sqs_reader.infrastructure.dependency_injection import DependenciesContainer
from sqs_reader.infrastructure.sqs_client import SQSClient

__all__ = [
    "DependenciesContainer",
    "SQSClient",
]
