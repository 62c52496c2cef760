import logging
from typing import Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ec2_worker.models import QueueMessage

logger = logging.getLogger("ec2_worker.queue")


def create_sqs_client(region: str, wait_time_seconds: int = 20):
    """
    Create a boto3 SQS client.

    The read timeout must outlast a long poll, otherwise botocore aborts
    the receive call before SQS answers.
    """
    return boto3.client(
        "sqs",
        region_name=region,
        config=Config(
            retries={"max_attempts": 3, "mode": "standard"},
            read_timeout=wait_time_seconds + 10,
        ),
    )


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "ClientError")
    return type(exc).__name__


class QueueModule:
    def __init__(
        self,
        sqs_client,
        queue_url: str,
        wait_time_seconds: int = 20,
        visibility_timeout: int = 30,
        max_messages: int = 1,
    ):
        """
        Initialize queue module.

        Args:
            sqs_client: boto3 SQS client
            queue_url: Input queue URL
            wait_time_seconds: Long poll wait per receive
            visibility_timeout: Seconds a received message stays hidden
            max_messages: Max messages to return per receive
        """
        self.sqs = sqs_client
        self.queue_url = queue_url
        self.wait_time_seconds = wait_time_seconds
        self.visibility_timeout = visibility_timeout
        self.max_messages = max_messages

    def receive_messages(self) -> List[QueueMessage]:
        """
        Long poll the input queue.

        Returns:
            List of messages (empty if none arrived within the wait time)

        Raises:
            ClientError, BotoCoreError: If the receive call fails. The poll
                loop decides how to recover.
        """
        response = self.sqs.receive_message(
            QueueUrl=self.queue_url,
            MaxNumberOfMessages=self.max_messages,
            WaitTimeSeconds=self.wait_time_seconds,
            VisibilityTimeout=self.visibility_timeout,
            MessageAttributeNames=["All"],
            AttributeNames=["ApproximateReceiveCount"],
        )

        return [QueueMessage.from_sqs(raw) for raw in response.get("Messages", [])]

    def delete_message(self, message: QueueMessage) -> bool:
        """
        Acknowledge a message by deleting it.

        Returns:
            True if deleted. Failures are logged; the message will be
            redelivered once its visibility timeout lapses.
        """
        if not message.receipt_handle:
            logger.error(f"Message {message.message_id} has no receipt handle, cannot delete")
            return False

        try:
            self.sqs.delete_message(QueueUrl=self.queue_url, ReceiptHandle=message.receipt_handle)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                f"Failed to delete message {message.message_id} ({_error_code(e)}): {e}"
            )
            return False

        logger.info(f"Message {message.message_id} deleted from queue")
        return True

    def get_queue_url(self, queue_name: str) -> Optional[str]:
        """
        Look up a queue URL by name.

        Returns:
            Queue URL, or None if the lookup failed
        """
        try:
            response = self.sqs.get_queue_url(QueueName=queue_name)
        except (BotoCoreError, ClientError) as e:
            code = _error_code(e)
            if code in ("AWS.SimpleQueueService.NonExistentQueue", "QueueDoesNotExist"):
                logger.error(f"Queue '{queue_name}' does not exist")
            else:
                logger.error(f"Failed to look up queue '{queue_name}' ({code}): {e}")
            return None

        return response.get("QueueUrl")

    def send_message(
        self, queue_url: str, body: str, attributes: Optional[Dict[str, str]] = None
    ) -> Optional[str]:
        """
        Send a message with string attributes.

        Returns:
            Message ID, or None if the send failed
        """
        message_attributes = {
            name: {"DataType": "String", "StringValue": value}
            for name, value in (attributes or {}).items()
        }

        try:
            response = self.sqs.send_message(
                QueueUrl=queue_url,
                MessageBody=body,
                MessageAttributes=message_attributes,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to send message to {queue_url} ({_error_code(e)}): {e}")
            return None

        return response.get("MessageId")
