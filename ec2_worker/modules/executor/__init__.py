"""
Executor Module - Black Box Interface

Purpose: Run an approved command as a local process
Interface: ProcessExecutor.execute(CommandDescriptor) -> ExecutionResult
Hidden: Process spawning, stream capture, spawn error handling

Commands are never run through a shell. There is no execution timeout.
"""

from .process_executor import ProcessExecutor

__all__ = ["ProcessExecutor"]
