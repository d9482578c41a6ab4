"""Dependency injection container for the application."""

import boto3
import httpx
from botocore.credentials import Credentials
from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer

from sqs_reader.config import Config
from sqs_reader.infrastructure.sqs_client import SQSClient


def _create_credentials(config: Config) -> Credentials:
    """Use explicit keys when given, otherwise the default boto3 credential chain."""
    if config.access_key and config.access_secret:
        return Credentials(config.access_key, config.access_secret)

    session = boto3.Session(region_name=config.aws_region)
    credentials = session.get_credentials()
    if credentials is None:
        raise ValueError(
            "No AWS credentials found; pass --access-key/--access-secret "
            "or configure an AWS profile"
        )
    return credentials


def _create_http_client(config: Config) -> httpx.Client:
    return httpx.Client(timeout=httpx.Timeout(config.http_timeout, connect=5.0))


def _create_poller(sqs_client: SQSClient, config: Config):
    """Factory for Poller to avoid circular import."""
    from sqs_reader.services.poller import Poller

    return Poller(
        sqs_client,
        wait_time_seconds=config.wait_time_seconds,
        max_messages=config.max_messages,
    )


def _create_deleter(sqs_client: SQSClient):
    """Factory for Deleter to avoid circular import."""
    from sqs_reader.services.deleter import Deleter

    return Deleter(sqs_client)


def _create_message_handler(config: Config):
    """Factory for MessageHandler to avoid circular import."""
    from sqs_reader.services.message_handler import MessageHandler

    return MessageHandler(
        skip_bad_lines=config.skip_bad_lines,
        isolate_messages=config.isolate_messages,
    )


def _create_stats():
    from sqs_reader.services.metrics import ReaderStats

    return ReaderStats()


class DependenciesContainer(DeclarativeContainer):
    """DI container for the application."""

    config = providers.Dependency(instance_of=Config)

    # Signing credentials and HTTP transport
    credentials = providers.Singleton(_create_credentials, config=config)

    http_client = providers.Singleton(_create_http_client, config=config)

    # SQS dependency chain
    sqs_client = providers.Singleton(
        SQSClient,
        http_client=http_client,
        endpoint=config.provided.endpoint,
        credentials=credentials,
        region=config.provided.aws_region,
    )

    poller = providers.Singleton(
        _create_poller,
        sqs_client=sqs_client,
        config=config,
    )

    deleter = providers.Singleton(
        _create_deleter,
        sqs_client=sqs_client,
    )

    message_handler = providers.Singleton(
        _create_message_handler,
        config=config,
    )

    stats = providers.Singleton(_create_stats)
