"""Logging configuration for VizSNP runs.

Console logging for the whole package plus an optional JSONL trail of batch
events (start, done, error) for reviewing long runs afterwards.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

PACKAGE_LOGGER = "vizsnp"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a single console handler to the package logger."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)
    return logger


class RunEventLogger:
    """Logger for per-batch pipeline events with structured output."""

    def __init__(self, log_dir: Path | None = None, enable_file_logging: bool = True):
        """Initialize the run event logger.

        Args:
            log_dir: Directory for log files. Defaults to ./logs
            enable_file_logging: Whether to write JSONL events to a file
        """
        self.logger = logging.getLogger(f"{PACKAGE_LOGGER}.runs")
        self.log_file: Path | None = None

        if enable_file_logging:
            if log_dir is None:
                log_dir = Path("./logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d")
            self.log_file = log_dir / f"vizsnp_runs_{timestamp}.jsonl"
            self.logger.info(f"Run event logging enabled: {self.log_file}")

    def _write(self, event_type: str, payload: dict[str, Any]) -> None:
        if self.log_file is None:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            **payload,
        }
        with open(self.log_file, "a") as f:
            f.write(json.dumps(entry) + "\n")

    def log_batch_start(self, batch_index: int, variant_count: int, species: str) -> None:
        self.logger.info(f"Batch {batch_index}: resolving {variant_count} variants ({species})")
        self._write(
            "batch_start",
            {"batch_index": batch_index, "variant_count": variant_count, "species": species},
        )

    def log_batch_done(
        self, batch_index: int, variant_count: int, record_count: int, skipped: int
    ) -> None:
        self.logger.info(
            f"Batch {batch_index}: {record_count}/{variant_count} variants annotated"
            + (f", {skipped} skipped" if skipped else "")
        )
        self._write(
            "batch_done",
            {
                "batch_index": batch_index,
                "variant_count": variant_count,
                "record_count": record_count,
                "skipped": skipped,
            },
        )

    def log_batch_error(self, batch_index: int, variant_count: int, error: Exception) -> None:
        self.logger.error(f"Batch {batch_index} failed: {error}")
        self._write(
            "batch_error",
            {
                "batch_index": batch_index,
                "variant_count": variant_count,
                "error": {"type": type(error).__name__, "message": str(error)},
            },
        )


# Global logger instance
_global_logger: RunEventLogger | None = None


def get_run_logger(log_dir: Path | None = None, enable_file_logging: bool = True) -> RunEventLogger:
    """Get or create the global run event logger."""
    global _global_logger

    if _global_logger is None:
        _global_logger = RunEventLogger(log_dir=log_dir, enable_file_logging=enable_file_logging)

    return _global_logger


def reset_run_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _global_logger
    _global_logger = None
