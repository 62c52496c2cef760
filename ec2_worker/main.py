#!/usr/bin/env python3
"""
EC2 Worker - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the SQS poll loop until SIGINT/SIGTERM

All business logic is in the modules, following black box principles.
"""

import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from ec2_worker.config.provider import ConfigProvider, EnvConfigProvider, WorkerConfig
from ec2_worker.logging_config import configure_logging

# Import modules through their black box interfaces
from ec2_worker.modules.allowlist import load_allowlist
from ec2_worker.modules.executor import ProcessExecutor
from ec2_worker.modules.publisher import ResponsePublisher, resolve_response_queue_name
from ec2_worker.modules.queue import QueueModule, create_sqs_client
from ec2_worker.modules.worker import MessageCoordinator, SQSWorker

logger = logging.getLogger("ec2_worker.main")


def build_worker(config: WorkerConfig, sqs_client=None) -> SQSWorker:
    """
    Wire the modules together.

    Args:
        config: Worker configuration
        sqs_client: boto3 SQS client, created from config if not given

    Returns:
        Ready-to-run worker

    Raises:
        ValueError: If the allowlist configuration is invalid
    """
    allowlist = load_allowlist(config.allowed_commands, config.allowlist_config)

    if sqs_client is None:
        sqs_client = create_sqs_client(config.region, config.wait_time_seconds)

    queue = QueueModule(
        sqs_client,
        config.queue_url,
        wait_time_seconds=config.wait_time_seconds,
        visibility_timeout=config.visibility_timeout,
    )

    response_queue_name = resolve_response_queue_name(config.response_queue_name, config.queue_url)
    publisher = ResponsePublisher(queue, response_queue_name)

    coordinator = MessageCoordinator(
        queue=queue,
        allowlist=allowlist,
        executor=ProcessExecutor(),
        publisher=publisher,
        parse_failure_max_receives=config.parse_failure_max_receives,
    )

    logger.info(f"Starting SQS worker for queue: {config.queue_url} ({config.region})")
    logger.info(f"Allowed commands: {', '.join(sorted(allowlist.commands))}")
    if response_queue_name:
        logger.info(f"Responses go to queue: {response_queue_name}")
    else:
        logger.warning("No response queue could be determined, responses are disabled")

    return SQSWorker(queue, coordinator, poll_interval=config.poll_interval)


def main(config_provider: Optional[ConfigProvider] = None) -> None:
    """Main entry point."""
    load_dotenv()

    provider = config_provider or EnvConfigProvider()
    try:
        config = provider.get_worker_config()
    except ValueError as e:
        configure_logging()
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(config.log_level)

    try:
        worker = build_worker(config)
    except ValueError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    worker.install_signal_handlers()

    try:
        worker.run()
    except KeyboardInterrupt:
        logger.info("Worker stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
