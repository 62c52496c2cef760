"""
Allowlist Module - Black Box Interface

Purpose: Decide whether a command may run
Interface: Allowlist.is_allowed(), load_allowlist()
Hidden: Base command normalization, allowlist sources

The allowlist bounds which binaries run, not what they do once invoked.
"""

from .allowlist import DEFAULT_ALLOWED_COMMANDS, Allowlist, load_allowlist

__all__ = ["DEFAULT_ALLOWED_COMMANDS", "Allowlist", "load_allowlist"]
