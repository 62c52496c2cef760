"""
Parser Module - Black Box Interface

Purpose: Turn a raw queue message body into a normalized command
Interface: parse_message() returning ParsedCommand or ParseFailure
Hidden: Wire shape detection, JSON payload validation, legacy text format

Can be replaced with a different message format without touching the worker.
"""

from .parser import MessageShape, ParsedCommand, ParseFailure, parse_message, tokenize

__all__ = ["MessageShape", "ParsedCommand", "ParseFailure", "parse_message", "tokenize"]
