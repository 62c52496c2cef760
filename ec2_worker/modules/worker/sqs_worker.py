"""
SQS poll loop.

Alternates long-poll receives with a fixed idle delay when nothing arrives.
Messages are processed one at a time to completion. Stopping is cooperative:
the stop flag is checked before every receive, so an in-flight message always
finishes before the loop exits.
"""

import logging
import signal
import sys
import threading
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from ec2_worker.modules.queue import QueueModule
from ec2_worker.modules.worker.coordinator import MessageCoordinator

logger = logging.getLogger("ec2_worker.worker")


class SQSWorker:
    """Long-running worker polling the input queue."""

    def __init__(
        self,
        queue: QueueModule,
        coordinator: MessageCoordinator,
        poll_interval: float = 5.0,
        stop_event: Optional[threading.Event] = None,
    ):
        """
        Initialize worker.

        Args:
            queue: Input queue
            coordinator: Per-message processing
            poll_interval: Seconds to wait after an empty or failed poll
            stop_event: Cancellation flag, created if not given
        """
        self.queue = queue
        self.coordinator = coordinator
        self.poll_interval = poll_interval
        self.stop_event = stop_event or threading.Event()
        self.processed_count = 0

    @property
    def stopping(self) -> bool:
        return self.stop_event.is_set()

    def request_stop(self, signum=None, frame=None) -> None:
        """
        Ask the loop to stop after the current message.

        Usable as a signal handler. A second request while already stopping
        exits immediately, abandoning the in-flight message to redelivery.
        """
        if self.stop_event.is_set() and signum is not None:
            logger.warning("Second shutdown signal received, exiting immediately")
            sys.exit(1)

        name = signal.Signals(signum).name if signum is not None else "request"
        logger.info(f"Shutting down ({name}), finishing in-flight work...")
        self.stop_event.set()

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to request_stop. Main thread only."""
        signal.signal(signal.SIGINT, self.request_stop)
        signal.signal(signal.SIGTERM, self.request_stop)

    def poll_once(self) -> int:
        """
        Receive and process one batch.

        Returns:
            Number of messages processed. Receive failures are logged and
            count as an empty poll.
        """
        try:
            messages = self.queue.receive_messages()
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error polling queue: {e}")
            return 0

        for message in messages:
            try:
                self.coordinator.process(message)
            except Exception:
                logger.exception(f"Unexpected error processing message {message.message_id}")
                continue
            self.processed_count += 1

        return len(messages)

    def run(self) -> None:
        """Main loop. Returns once a stop has been requested."""
        logger.info(f"Polling {self.queue.queue_url}")

        while not self.stopping:
            received = self.poll_once()
            if received == 0 and not self.stopping:
                # Event.wait returns early when a stop is requested
                self.stop_event.wait(self.poll_interval)

        logger.info(f"Worker stopped after processing {self.processed_count} message(s)")
