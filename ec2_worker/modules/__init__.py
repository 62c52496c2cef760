"""
EC2 Worker Modules - Black Box Architecture

Each module is a self-contained black box with:
- A small public interface exported from its __init__
- Hidden implementation details
- Single responsibility

The worker module composes the others; no other module imports the worker.
"""
