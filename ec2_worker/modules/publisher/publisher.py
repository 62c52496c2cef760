"""
Response publisher for execution results.

Results are sent to a response queue as JSON, keyed by the correlation id of
the request. The response queue is named explicitly or derived from the
input queue URL ("https://.../123456789012/jobs" -> "jobs-responses").
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from pydantic import ValidationError

from ec2_worker.models import CORRELATION_ID_ATTRIBUTE, ExecutionResult, ResponseMessage
from ec2_worker.modules.queue import QueueModule

logger = logging.getLogger("ec2_worker.publisher")

RESPONSE_QUEUE_SUFFIX = "-responses"


def resolve_response_queue_name(
    explicit_name: Optional[str], input_queue_url: Optional[str]
) -> Optional[str]:
    """
    Determine the response queue name.

    Args:
        explicit_name: Configured override, wins when non-empty
        input_queue_url: Input queue URL; its last path segment is used

    Returns:
        Queue name, or None when responses are disabled
    """
    if explicit_name and explicit_name.strip():
        return explicit_name.strip()

    if not input_queue_url:
        return None

    path = urlparse(input_queue_url).path or input_queue_url
    last_segment = path.split("/")[-1]
    if not last_segment:
        return None

    return f"{last_segment}{RESPONSE_QUEUE_SUFFIX}"


class ResponsePublisher:
    """Sends execution results to the response queue."""

    def __init__(self, queue: QueueModule, response_queue_name: Optional[str]):
        """
        Initialize publisher.

        Args:
            queue: Queue module used for lookup and send
            response_queue_name: Destination name, None disables publishing
        """
        self.queue = queue
        self.response_queue_name = response_queue_name
        self._response_queue_url: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.response_queue_name)

    def _resolve_queue_url(self) -> Optional[str]:
        # Cached after the first successful lookup; failed lookups are not retried here
        if self._response_queue_url is None:
            self._response_queue_url = self.queue.get_queue_url(self.response_queue_name)
        return self._response_queue_url

    def publish(self, correlation_id: str, result: ExecutionResult) -> None:
        """
        Publish a result. Never raises.

        Args:
            correlation_id: Id of the originating request
            result: Execution result to report
        """
        if not self.enabled:
            logger.debug("No response queue configured, skipping response")
            return

        try:
            response = ResponseMessage.from_result(correlation_id, result)
        except ValidationError as e:
            logger.error(f"Could not build response for {correlation_id!r}: {e}")
            return

        queue_url = self._resolve_queue_url()
        if not queue_url:
            logger.error(
                f"Response for {correlation_id} dropped: queue '{self.response_queue_name}' unavailable"
            )
            return

        message_id = self.queue.send_message(
            queue_url,
            response.to_json(),
            attributes={CORRELATION_ID_ATTRIBUTE: correlation_id},
        )

        if message_id:
            logger.info(f"Response sent for {correlation_id} (message {message_id})")
        else:
            logger.error(f"Response for {correlation_id} was not delivered")
