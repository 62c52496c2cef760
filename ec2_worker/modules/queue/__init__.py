"""
Queue Module - Black Box Interface

Purpose: Receive, acknowledge and send SQS messages
Interface: receive_messages(), delete_message(), get_queue_url(), send_message()
Hidden: boto3 client configuration, long polling, error code mapping

Can be replaced with any queue offering visibility-timeout redelivery.
"""

from .queue import QueueModule, create_sqs_client

__all__ = ["QueueModule", "create_sqs_client"]
