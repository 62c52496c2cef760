"""
EC2 worker shared data models.

These models define the structure of all data passed between
components of the worker: the normalized command, the queue message,
the execution result and the response wire body.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

CORRELATION_ID_ATTRIBUTE = "CorrelationId"

# Exit code reported when the process could not be spawned at all
SPAWN_FAILURE_EXIT_CODE = -1


@dataclass(frozen=True)
class CommandDescriptor:
    """Normalized command ready for the allowlist check and execution."""

    command: str
    args: Tuple[str, ...] = field(default_factory=tuple)
    working_directory: Optional[str] = None

    def argv(self) -> list:
        """Argument vector passed to the process spawn."""
        return [self.command, *self.args]

    def display(self) -> str:
        """Human readable form for logs."""
        return " ".join(self.argv())


@dataclass(frozen=True)
class QueueMessage:
    """A message received from the input queue."""

    message_id: str
    body: str
    receipt_handle: str
    correlation_id: Optional[str] = None
    receive_count: int = 1

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any]) -> "QueueMessage":
        """
        Build from a ReceiveMessage entry.

        The correlation id comes from the CorrelationId message attribute,
        falling back to the message id.
        """
        message_id = raw.get("MessageId") or ""
        attributes = raw.get("MessageAttributes") or {}
        correlation_attr = attributes.get(CORRELATION_ID_ATTRIBUTE) or {}
        correlation_id = correlation_attr.get("StringValue") or message_id or None

        system_attributes = raw.get("Attributes") or {}
        try:
            receive_count = int(system_attributes.get("ApproximateReceiveCount", 1))
        except (TypeError, ValueError):
            receive_count = 1

        return cls(
            message_id=message_id,
            body=raw.get("Body") or "",
            receipt_handle=raw.get("ReceiptHandle") or "",
            correlation_id=correlation_id,
            receive_count=receive_count,
        )


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running (or refusing to run) a command."""

    success: bool
    exit_code: int
    stdout: str = ""
    stderr: Optional[str] = None

    def __post_init__(self):
        # Empty stderr is carried as None so the wire form round-trips
        if self.stderr == "":
            object.__setattr__(self, "stderr", None)

    @classmethod
    def from_exit(cls, exit_code: int, stdout: str, stderr: str) -> "ExecutionResult":
        return cls(success=exit_code == 0, exit_code=exit_code, stdout=stdout or "", stderr=stderr)

    @classmethod
    def rejected(cls, command: str) -> "ExecutionResult":
        """Result for a command refused by the allowlist."""
        return cls(
            success=False,
            exit_code=1,
            stdout="",
            stderr=f'Command "{command}" is not in the allowlist',
        )

    @classmethod
    def spawn_failure(cls, message: str) -> "ExecutionResult":
        """Result for a process that could not be started."""
        return cls(success=False, exit_code=SPAWN_FAILURE_EXIT_CODE, stdout="", stderr=message)


class ResponseMessage(BaseModel):
    """Response body sent to the response queue."""

    model_config = ConfigDict(populate_by_name=True)

    correlation_id: str = Field(..., alias="correlationId", min_length=1)
    success: bool
    stdout: str = ""
    stderr: str = ""
    exit_code: int = Field(..., alias="exitCode")

    @field_validator("stdout", "stderr", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Missing stream output is sent as an empty string."""
        return "" if v is None else v

    @classmethod
    def from_result(cls, correlation_id: str, result: ExecutionResult) -> "ResponseMessage":
        return cls(
            correlation_id=correlation_id,
            success=result.success,
            stdout=result.stdout,
            stderr=result.stderr,
            exit_code=result.exit_code,
        )

    def to_result(self) -> ExecutionResult:
        """Recover the execution result, as a response consumer would."""
        return ExecutionResult(
            success=self.success,
            exit_code=self.exit_code,
            stdout=self.stdout,
            stderr=self.stderr or None,
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
