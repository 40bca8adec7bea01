"""Utility functions."""

from vizsnp.utils.batching import batch
from vizsnp.utils.logging_config import configure_logging, get_run_logger, reset_run_logger

__all__ = [
    "batch",
    "configure_logging",
    "get_run_logger",
    "reset_run_logger",
]
