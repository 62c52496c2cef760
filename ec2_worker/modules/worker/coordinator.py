"""
Message lifecycle coordinator.

Drives one queue message through

    RECEIVED -> PARSED | PARSE_FAILED
             -> ALLOWED | REJECTED
             -> EXECUTED (allowed only)
             -> RESPONDED (when a correlation id exists)
             -> ACKNOWLEDGED

Allowed and rejected messages are always deleted after the response attempt,
whatever the command's exit status. Malformed messages are never answered;
they are deleted once their receive count reaches the configured threshold.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ec2_worker.models import ExecutionResult, QueueMessage
from ec2_worker.modules.allowlist import Allowlist
from ec2_worker.modules.executor import ProcessExecutor
from ec2_worker.modules.parser import ParseFailure, parse_message
from ec2_worker.modules.publisher import ResponsePublisher
from ec2_worker.modules.queue import QueueModule

logger = logging.getLogger("ec2_worker.coordinator")


class MessageState(Enum):
    """Processing states of a queue message."""

    RECEIVED = "received"
    PARSED = "parsed"
    PARSE_FAILED = "parse_failed"
    ALLOWED = "allowed"
    REJECTED = "rejected"
    EXECUTED = "executed"
    RESPONDED = "responded"
    ACKNOWLEDGED = "acknowledged"


@dataclass
class ProcessingOutcome:
    """What happened to a message."""

    message_id: str
    states: List[MessageState] = field(default_factory=list)
    result: Optional[ExecutionResult] = None
    acknowledged: bool = False

    @property
    def state(self) -> MessageState:
        return self.states[-1]

    def transition(self, state: MessageState) -> None:
        logger.debug(f"Message {self.message_id}: {self.state.value} -> {state.value}")
        self.states.append(state)


class MessageCoordinator:
    """Processes queue messages one at a time."""

    def __init__(
        self,
        queue: QueueModule,
        allowlist: Allowlist,
        executor: ProcessExecutor,
        publisher: ResponsePublisher,
        parse_failure_max_receives: int = 1,
    ):
        """
        Initialize coordinator.

        Args:
            queue: Queue module used to acknowledge messages
            allowlist: Commands permitted to run
            executor: Process executor
            publisher: Response publisher
            parse_failure_max_receives: Delete a malformed message once it has
                been received this many times. 0 never deletes it.
        """
        self.queue = queue
        self.allowlist = allowlist
        self.executor = executor
        self.publisher = publisher
        self.parse_failure_max_receives = parse_failure_max_receives

    def process(self, message: QueueMessage) -> ProcessingOutcome:
        """
        Process a message to completion.

        Args:
            message: Received queue message

        Returns:
            ProcessingOutcome with the visited states
        """
        outcome = ProcessingOutcome(message_id=message.message_id, states=[MessageState.RECEIVED])
        logger.info(f"Received message {message.message_id}: {message.body!r}")

        parsed = parse_message(message.body)
        if isinstance(parsed, ParseFailure):
            outcome.transition(MessageState.PARSE_FAILED)
            logger.error(f"Invalid message format in {message.message_id}: {parsed.reason}")
            if self._should_discard_malformed(message):
                self._acknowledge(message, outcome)
            return outcome

        outcome.transition(MessageState.PARSED)
        command = parsed.descriptor

        if self.allowlist.is_allowed(command.command):
            outcome.transition(MessageState.ALLOWED)
            outcome.result = self.executor.execute(command)
            outcome.transition(MessageState.EXECUTED)
        else:
            outcome.transition(MessageState.REJECTED)
            logger.error(f'Command "{command.command}" is not in the allowlist')
            outcome.result = ExecutionResult.rejected(command.command)

        if message.correlation_id:
            self.publisher.publish(message.correlation_id, outcome.result)
            outcome.transition(MessageState.RESPONDED)
        else:
            logger.warning(f"Message {message.message_id} has no correlation id, no response sent")

        self._acknowledge(message, outcome)
        return outcome

    def _should_discard_malformed(self, message: QueueMessage) -> bool:
        if self.parse_failure_max_receives <= 0:
            logger.warning(
                f"Leaving malformed message {message.message_id} on the queue "
                f"(received {message.receive_count} time(s))"
            )
            return False

        if message.receive_count >= self.parse_failure_max_receives:
            logger.warning(
                f"Discarding malformed message {message.message_id} "
                f"after {message.receive_count} receive(s)"
            )
            return True

        return False

    def _acknowledge(self, message: QueueMessage, outcome: ProcessingOutcome) -> None:
        if self.queue.delete_message(message):
            outcome.acknowledged = True
            outcome.transition(MessageState.ACKNOWLEDGED)
        else:
            logger.warning(
                f"Message {message.message_id} not acknowledged, it may be redelivered "
                f"after the visibility timeout"
            )
