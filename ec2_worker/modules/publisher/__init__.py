"""
Publisher Module - Black Box Interface

Purpose: Report execution results back to the requester
Interface: ResponsePublisher.publish(), resolve_response_queue_name()
Hidden: Response queue lookup, wire body, correlation attribute

Best effort: no delivery guarantee, failures are logged and dropped.
"""

from .publisher import RESPONSE_QUEUE_SUFFIX, ResponsePublisher, resolve_response_queue_name

__all__ = ["RESPONSE_QUEUE_SUFFIX", "ResponsePublisher", "resolve_response_queue_name"]
