"""Shared utilities for structured logging and JSONL input/output."""

from .io_utils import iter_jsonl, read_jsonl, write_jsonl
from .logging import (
    JsonLogFormatter,
    configure_json_logger,
    flush_handlers,
    generate_trace_id,
    log_event,
)

__all__ = [
    "JsonLogFormatter",
    "configure_json_logger",
    "flush_handlers",
    "generate_trace_id",
    "log_event",
    "iter_jsonl",
    "read_jsonl",
    "write_jsonl",
]
