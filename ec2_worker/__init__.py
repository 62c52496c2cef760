"""
EC2 Worker - SQS Command Execution Worker

A long-running worker that polls an SQS queue, validates each message
against a command allowlist, runs the permitted command as a local
process and reports the result back over a response queue.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- parser: Message body to command descriptor
- allowlist: Base command allowlist gate
- executor: Local process execution
- queue: SQS receive/delete/send
- publisher: Execution result responses
- worker: Message lifecycle and poll loop
"""

__version__ = "1.0.0"
