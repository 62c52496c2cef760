"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class WorkerConfig:
    """Worker configuration."""
    queue_url: str
    region: str
    response_queue_name: Optional[str]
    poll_interval: float
    wait_time_seconds: int
    visibility_timeout: int
    parse_failure_max_receives: int
    allowed_commands: Optional[str]
    allowlist_config: Optional[str]
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_worker_config(self) -> WorkerConfig:
        """Get worker configuration."""
        ...


def _int_env(name: str, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise ValueError(f"{name} must be {bounds}, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_worker_config(self) -> WorkerConfig:
        """Get worker configuration from environment variables."""
        # The input queue is required - the worker has nothing to do without it
        queue_url = (os.getenv("SQS_QUEUE_URL") or "").strip()
        if not queue_url:
            raise ValueError("SQS_QUEUE_URL environment variable is required")

        return WorkerConfig(
            queue_url=queue_url,
            region=os.getenv("AWS_REGION") or DEFAULT_REGION,
            response_queue_name=os.getenv("RESPONSE_QUEUE_NAME") or None,
            poll_interval=_float_env("POLL_INTERVAL_SECONDS", 5.0),
            wait_time_seconds=_int_env("WAIT_TIME_SECONDS", 20, 0, 20),
            visibility_timeout=_int_env("VISIBILITY_TIMEOUT", 30, 0, 43200),
            parse_failure_max_receives=_int_env("PARSE_FAILURE_MAX_RECEIVES", 1, 0),
            allowed_commands=os.getenv("ALLOWED_COMMANDS") or None,
            allowlist_config=os.getenv("ALLOWLIST_CONFIG") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
