"""Configuration management for the SQS reader."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


@dataclass
class Config:
    """Reader configuration loaded from environment variables."""

    # Queue endpoint and credentials
    endpoint: str = os.getenv("SQS_ENDPOINT", "")
    access_key: str = os.getenv("AWS_ACCESS_KEY_ID", "")
    access_secret: str = os.getenv("AWS_SECRET_ACCESS_KEY", "")
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")

    # Polling
    wait_time_seconds: int = int(os.getenv("WAIT_TIME_SECONDS", "20"))
    max_messages: int = int(os.getenv("MAX_MESSAGES", "10"))

    # Concurrency
    max_workers: int = int(os.getenv("MAX_WORKERS", "16"))
    max_inflight_polls: int | None = _env_optional_int("MAX_INFLIGHT_POLLS")
    # Records waiting for stdout before handlers block
    record_buffer: int = int(os.getenv("RECORD_BUFFER", "100"))

    # Failure policy for malformed messages
    skip_bad_lines: bool = _env_flag("SKIP_BAD_LINES")
    isolate_messages: bool = _env_flag("ISOLATE_MESSAGES")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def http_timeout(self) -> float:
        """Read timeout that outlasts a long poll."""
        return float(self.wait_time_seconds + 10)

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.endpoint:
            raise ValueError("SQS endpoint is required (--endpoint or SQS_ENDPOINT)")
        if not 1 <= self.max_messages <= 10:
            raise ValueError("MAX_MESSAGES must be between 1 and 10")
        if not 0 <= self.wait_time_seconds <= 20:
            raise ValueError("WAIT_TIME_SECONDS must be between 0 and 20")
        if self.max_workers < 1:
            raise ValueError("MAX_WORKERS must be positive")
        if self.max_inflight_polls is not None and self.max_inflight_polls < 1:
            raise ValueError("MAX_INFLIGHT_POLLS must be positive when set")
        if self.record_buffer < 1:
            raise ValueError("RECORD_BUFFER must be positive")


config = Config()
