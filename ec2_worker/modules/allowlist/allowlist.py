"""
Command allowlist for the EC2 worker.

The allowlist is fixed at start-up. It is built from, in order of precedence,
the ALLOWED_COMMANDS environment variable, a YAML file, or the built-in
defaults.

YAML format:

    commands:
      - ls
      - git
"""

import logging
import re
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

import yaml

logger = logging.getLogger("ec2_worker.allowlist")

DEFAULT_ALLOWED_COMMANDS = frozenset(
    {
        "ls",
        "grep",
        "git",
        "cat",
        "echo",
        "pwd",
        "whoami",
        "date",
        "uname",
    }
)

_WHITESPACE = re.compile(r"\s+")


class Allowlist:
    """Immutable set of base command names permitted to run."""

    def __init__(self, commands: Iterable[str]):
        self._commands: FrozenSet[str] = frozenset(c for c in commands if c)

    @property
    def commands(self) -> FrozenSet[str]:
        return self._commands

    @staticmethod
    def base_command(command: str) -> str:
        """
        Reduce a command to its base name.

        "/usr/bin/git" -> "git", "git status" -> "git". No case folding.
        """
        base = command.split("/")[-1]
        if _WHITESPACE.search(base):
            base = _WHITESPACE.split(base)[0]
        return base

    def is_allowed(self, command: str) -> bool:
        """Check the base command name against the allowlist. Never raises."""
        if not isinstance(command, str) or not command:
            return False
        return self.base_command(command) in self._commands

    def __contains__(self, command: str) -> bool:
        return self.is_allowed(command)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return f"Allowlist({sorted(self._commands)!r})"


def _load_yaml(path: Path) -> Optional[Allowlist]:
    if not path.exists():
        logger.warning(f"Allowlist config not found: {path}, using defaults")
        return None

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read allowlist config {path}: {e}") from e

    commands = data.get("commands") if isinstance(data, dict) else None
    if not isinstance(commands, list) or not all(isinstance(c, str) for c in commands):
        raise ValueError(f"Allowlist config {path} must contain a 'commands' list of strings")

    logger.info(f"Loaded {len(commands)} allowed commands from {path}")
    return Allowlist(c.strip() for c in commands)


def load_allowlist(
    allowed_commands: Optional[str] = None, config_path: Optional[str] = None
) -> Allowlist:
    """
    Build the allowlist once at start-up.

    Args:
        allowed_commands: Comma-separated command names (takes precedence)
        config_path: Path to a YAML allowlist file

    Returns:
        Allowlist

    Raises:
        ValueError: If the YAML file exists but is malformed
    """
    if allowed_commands:
        return Allowlist(c.strip() for c in allowed_commands.split(","))

    if config_path:
        allowlist = _load_yaml(Path(config_path))
        if allowlist is not None:
            return allowlist

    return Allowlist(DEFAULT_ALLOWED_COMMANDS)
