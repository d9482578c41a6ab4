"""Entry point for the SQS reader CLI."""

import argparse
import logging
import signal
import sys
import threading
from dataclasses import replace

from sqs_reader.config import Config, config
from sqs_reader.handlers.reader import Reader
from sqs_reader.infrastructure import DependenciesContainer
from sqs_reader.services.sink import JsonLinesSink, RecordBuffer

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging on stderr; stdout carries the record stream."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Drain an SQS queue and print each enveloped JSON record as a line"
    )
    parser.add_argument("--endpoint", "-endpoint", default=config.endpoint, help="SQS endpoint (queue URL)")
    parser.add_argument("--access-key", "-accessKey", dest="access_key", default=config.access_key, help="AWS access key")
    parser.add_argument(
        "--access-secret", "-accessSecret", dest="access_secret", default=config.access_secret, help="AWS secret key"
    )
    parser.add_argument("--region", default=config.aws_region, help="Signing region when the endpoint has none")
    parser.add_argument("--wait-time", type=int, default=config.wait_time_seconds, help="Long polling wait in seconds")
    parser.add_argument("--max-messages", type=int, default=config.max_messages, help="Messages per poll (1-10)")
    parser.add_argument("--workers", type=int, default=config.max_workers, help="Size of the task thread pool")
    parser.add_argument(
        "--max-inflight-polls",
        type=int,
        default=config.max_inflight_polls,
        help="Bound on concurrent poll cycles (default: unbounded)",
    )
    parser.add_argument(
        "--record-buffer",
        type=int,
        default=config.record_buffer,
        help="Records held for output before handlers wait on stdout",
    )
    parser.add_argument(
        "--skip-bad-lines",
        action=argparse.BooleanOptionalAction,
        default=config.skip_bad_lines,
        help="Keep decoding the other lines of a message after a malformed line",
    )
    parser.add_argument(
        "--isolate-messages",
        action=argparse.BooleanOptionalAction,
        default=config.isolate_messages,
        help="Keep handling the rest of a batch after a malformed message",
    )
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Overlay command line arguments on the environment configuration."""
    return replace(
        config,
        endpoint=args.endpoint,
        access_key=args.access_key,
        access_secret=args.access_secret,
        aws_region=args.region,
        wait_time_seconds=args.wait_time,
        max_messages=args.max_messages,
        max_workers=args.workers,
        max_inflight_polls=args.max_inflight_polls,
        record_buffer=args.record_buffer,
        skip_bad_lines=args.skip_bad_lines,
        isolate_messages=args.isolate_messages,
        log_level=args.log_level,
    )


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def run(cfg: Config, sink: JsonLinesSink) -> None:
    """Start the reader and write its records to the sink until interrupted."""
    container = DependenciesContainer(config=cfg)
    records = RecordBuffer(maxsize=cfg.record_buffer)

    reader = Reader(
        poller=container.poller(),
        deleter=container.deleter(),
        handler=container.message_handler(),
        emit=records.put,
        stats=container.stats(),
        max_workers=cfg.max_workers,
        max_inflight_polls=cfg.max_inflight_polls,
    )

    logger.info("SQS endpoint: %s", container.sqs_client().endpoint)
    logger.info("Signing region: %s", container.sqs_client().region)

    thread = threading.Thread(target=reader.start, name="sqs-reader-loop", daemon=True)
    thread.start()
    try:
        while True:
            sink.write(records.get())
    finally:
        records.close()
        reader.stop()
        thread.join(timeout=5)
        container.http_client().close()


def main():
    """Entry point with CLI argument parsing."""
    args = parse_args()
    cfg = build_config(args)
    setup_logging(cfg.log_level)

    try:
        cfg.validate()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    signal.signal(signal.SIGTERM, _raise_interrupt)

    try:
        run(cfg, JsonLinesSink(sys.stdout))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error("Fatal error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
