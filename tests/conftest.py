"""
Shared pytest fixtures for EC2 worker tests.

This module provides common fixtures including:
- ProcessMocker: Mock subprocess.run calls with canned responses
- SQS client mocks for queue/publisher/worker tests
- Raw SQS message builders
"""

import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Union
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

INPUT_QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/jobs"
RESPONSE_QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/jobs-responses"


# =============================================================================
# Process Mocking Infrastructure
# =============================================================================

@dataclass
class ProcessResponse:
    """Represents a mocked process result."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    def to_completed_process(self) -> MagicMock:
        """Convert to a subprocess.CompletedProcess-like mock."""
        result = MagicMock()
        result.stdout = self.stdout
        result.stderr = self.stderr
        result.returncode = self.returncode
        return result


@dataclass
class ProcessCall:
    """Record of a process spawn made during testing."""
    argv: List[str]
    cwd: Optional[str]
    shell: bool
    matched_pattern: Optional[str] = None


class ProcessMocker:
    """
    Mock subprocess.run with pattern-matched responses.

    Usage:
        def test_echo(process_mocker):
            process_mocker.register("echo hello", ProcessResponse(stdout="hello\\n"))
            result = executor.execute(descriptor)
            assert process_mocker.was_called_with("echo hello")
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._errors: List[tuple] = []
        self._call_history: List[ProcessCall] = []
        self._default_response = ProcessResponse(
            stderr="Error: mock not configured for this command",
            returncode=1
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: ProcessResponse,
    ) -> "ProcessMocker":
        """Register a response for argv strings matching the pattern."""
        self._responses.append((pattern, response))
        return self

    def register_error(self, pattern: Union[str, Pattern], error: Exception) -> "ProcessMocker":
        """Make spawns matching the pattern raise instead of returning."""
        self._errors.append((pattern, error))
        return self

    @staticmethod
    def _matches(pattern: Union[str, Pattern], cmd_str: str) -> bool:
        if isinstance(pattern, str):
            return pattern in cmd_str
        return bool(pattern.search(cmd_str))

    def mock_run(self, cmd: List[str], **kwargs) -> MagicMock:
        """Side effect for patching subprocess.run."""
        cmd_str = " ".join(cmd)
        call = ProcessCall(argv=list(cmd), cwd=kwargs.get("cwd"), shell=kwargs.get("shell", False))
        self._call_history.append(call)

        for pattern, error in self._errors:
            if self._matches(pattern, cmd_str):
                raise error

        for pattern, response in self._responses:
            if self._matches(pattern, cmd_str):
                call.matched_pattern = pattern if isinstance(pattern, str) else pattern.pattern
                return response.to_completed_process()

        return self._default_response.to_completed_process()

    @property
    def calls(self) -> List[ProcessCall]:
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    def was_called_with(self, pattern: str) -> bool:
        return any(pattern in " ".join(call.argv) for call in self._call_history)


@pytest.fixture
def process_mocker():
    """ProcessMocker with subprocess.run patched."""
    mocker = ProcessMocker()
    with patch("subprocess.run", side_effect=mocker.mock_run):
        yield mocker


# =============================================================================
# SQS Mocking Infrastructure
# =============================================================================

def client_error(code: str, operation: str = "Operation") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": f"{code} (mocked)"}}, operation)


def sqs_message(
    body: str,
    message_id: str = "msg-1",
    receipt_handle: str = "receipt-1",
    correlation_id: Optional[str] = None,
    receive_count: Optional[int] = None,
) -> Dict[str, Any]:
    """Build a raw ReceiveMessage entry."""
    raw: Dict[str, Any] = {
        "MessageId": message_id,
        "ReceiptHandle": receipt_handle,
        "Body": body,
    }
    if correlation_id is not None:
        raw["MessageAttributes"] = {
            "CorrelationId": {"DataType": "String", "StringValue": correlation_id}
        }
    if receive_count is not None:
        raw["Attributes"] = {"ApproximateReceiveCount": str(receive_count)}
    return raw


@pytest.fixture
def mock_sqs():
    """Mock boto3 SQS client with sensible defaults."""
    sqs = MagicMock()
    sqs.receive_message.return_value = {}
    sqs.delete_message.return_value = {}
    sqs.get_queue_url.return_value = {"QueueUrl": RESPONSE_QUEUE_URL}
    sqs.send_message.return_value = {"MessageId": "response-1"}
    return sqs


@pytest.fixture
def queue_module(mock_sqs):
    from ec2_worker.modules.queue import QueueModule

    return QueueModule(mock_sqs, INPUT_QUEUE_URL)


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "process_mock: Tests using mocked subprocess calls"
    )
    config.addinivalue_line(
        "markers", "integration: Tests spawning real processes"
    )
