"""
Process executor for the EC2 worker.

Runs an allowlisted command with its argument vector passed as discrete
tokens (no shell), captures stdout/stderr as text and reports the exit code.
Spawn errors are turned into failed results instead of propagating.
"""

import logging
import subprocess
import time
from typing import Optional

from ec2_worker.models import CommandDescriptor, ExecutionResult

logger = logging.getLogger("ec2_worker.executor")


class ProcessExecutor:
    """Executes commands as child processes."""

    def __init__(self, default_cwd: Optional[str] = None):
        """
        Initialize executor.

        Args:
            default_cwd: Working directory used when a command has none.
                None means the worker's own working directory.
        """
        self.default_cwd = default_cwd

    def execute(self, command: CommandDescriptor) -> ExecutionResult:
        """
        Execute a command and capture its output.

        Args:
            command: Normalized command descriptor

        Returns:
            ExecutionResult, never raises
        """
        cmd = command.argv()
        cwd = command.working_directory or self.default_cwd

        logger.info(f"Executing: {command.display()}" + (f" (cwd: {cwd})" if cwd else ""))
        start_time = time.time()

        try:
            process = subprocess.run(
                cmd,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
            )

        except FileNotFoundError as e:
            # Raised for both a missing binary and a missing cwd
            logger.error(f"Command could not be started: {e}")
            return ExecutionResult.spawn_failure(str(e))

        except PermissionError as e:
            logger.error(f"Permission denied starting command: {e}")
            return ExecutionResult.spawn_failure(str(e))

        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.error(f"Command execution failed: {e}")
            return ExecutionResult.spawn_failure(str(e))

        elapsed_ms = int((time.time() - start_time) * 1000)
        result = ExecutionResult.from_exit(process.returncode, process.stdout, process.stderr)

        if result.success:
            logger.info(f"Command executed successfully in {elapsed_ms}ms")
        else:
            logger.warning(f"Command exited with code {result.exit_code} in {elapsed_ms}ms")
            if result.stderr:
                logger.debug(f"stderr: {result.stderr}")

        return result
