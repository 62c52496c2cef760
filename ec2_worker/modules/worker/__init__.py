"""
Worker Module - Black Box Interface

Purpose: Drive messages from the input queue through parse, allowlist,
execution, response and acknowledgment
Interface: MessageCoordinator.process(), SQSWorker.run(), SQSWorker.request_stop()
Hidden: Message state transitions, malformed message policy, poll pacing

One message at a time per process; run more processes to scale out.
"""

from .coordinator import MessageCoordinator, MessageState, ProcessingOutcome
from .sqs_worker import SQSWorker

__all__ = ["MessageCoordinator", "MessageState", "ProcessingOutcome", "SQSWorker"]
