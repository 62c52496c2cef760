"""
Command parser for queue message bodies.

Three wire shapes are accepted, tried in order:

1. JSON string:  "ls -la"
2. JSON object:  {"command": "git", "args": ["status"], "cwd": "/srv/app"}
3. Legacy text (only when the body is not JSON at all):
   "... command=ls -la]" or simply "ls -la"
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ec2_worker.models import CommandDescriptor

logger = logging.getLogger("ec2_worker.parser")

_WHITESPACE = re.compile(r"\s+")
_LEGACY_COMMAND = re.compile(r"command=(.*)\]", re.DOTALL)


class MessageShape(Enum):
    """Wire shape a command was decoded from."""

    JSON_STRING = "json_string"
    JSON_OBJECT = "json_object"
    LEGACY_TEXT = "legacy_text"


@dataclass(frozen=True)
class ParsedCommand:
    """Successful parse."""

    descriptor: CommandDescriptor
    shape: MessageShape


@dataclass(frozen=True)
class ParseFailure:
    """Body could not be turned into a command."""

    reason: str


ParseResult = Union[ParsedCommand, ParseFailure]


class CommandPayload(BaseModel):
    """Structured command object."""

    model_config = ConfigDict(extra="ignore")

    command: str = Field(..., min_length=1)
    args: Optional[List[str]] = None
    cwd: Optional[str] = None

    @field_validator("args")
    @classmethod
    def default_args(cls, v):
        return v or []


def tokenize(text: str) -> List[str]:
    """Split on runs of whitespace, ignoring leading and trailing whitespace."""
    return [token for token in _WHITESPACE.split(text.strip()) if token]


def _from_tokens(tokens: List[str], shape: MessageShape) -> ParseResult:
    if not tokens:
        return ParseFailure(f"{shape.value} message contains no command")
    return ParsedCommand(
        descriptor=CommandDescriptor(command=tokens[0], args=tuple(tokens[1:])),
        shape=shape,
    )


def _decode_json_string(value: str) -> ParseResult:
    return _from_tokens(tokenize(value), MessageShape.JSON_STRING)


def _decode_json_object(value: dict) -> ParseResult:
    try:
        payload = CommandPayload.model_validate(value)
    except ValidationError as e:
        return ParseFailure(f"Invalid command object: {e.error_count()} validation error(s)")

    return ParsedCommand(
        descriptor=CommandDescriptor(
            command=payload.command,
            args=tuple(payload.args or ()),
            working_directory=payload.cwd or None,
        ),
        shape=MessageShape.JSON_OBJECT,
    )


def _decode_legacy_text(body: str) -> ParseResult:
    match = _LEGACY_COMMAND.search(body)
    text = match.group(1) if match else body
    return _from_tokens(tokenize(text), MessageShape.LEGACY_TEXT)


def parse_message(body: Optional[str]) -> ParseResult:
    """
    Parse a raw message body into a command descriptor.

    Args:
        body: Raw SQS message body

    Returns:
        ParsedCommand on success, ParseFailure otherwise. Never raises.
    """
    if body is None or not body.strip():
        return ParseFailure("Message body is empty")

    try:
        decoded = json.loads(body)
    except json.JSONDecodeError:
        logger.debug("Body is not JSON, trying legacy text format")
        return _decode_legacy_text(body)
    except RecursionError:
        return ParseFailure("Message body nests too deeply")

    if isinstance(decoded, str):
        return _decode_json_string(decoded)

    if isinstance(decoded, dict):
        return _decode_json_object(decoded)

    return ParseFailure(f"Unsupported JSON payload type: {type(decoded).__name__}")
