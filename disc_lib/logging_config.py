"""
Structured logging configuration using structlog.

Provides JSON-structured logs that are queryable and include:
- Timestamp
- Log level
- Component name
- Incidence matrix snapshots (hashed when large)
- Memory usage

Created: 2026-10-19
"""

import structlog
import logging
import sys
import hashlib
import psutil
import numpy as np
from typing import Any, Dict, Optional


def hash_array(arr: np.ndarray) -> str:
    """Short content hash of an array, for logging without dumping it."""
    if arr.size == 0:
        return "empty"
    digest = hashlib.md5(np.ascontiguousarray(arr).tobytes()).hexdigest()[:8]
    return f"{digest}_shape_{arr.shape}_dtype_{arr.dtype}"


def get_memory_usage() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / 1024 / 1024


def incidence_snapshot(matrix: np.ndarray, max_size: int = 100) -> Dict[str, Any]:
    """
    Summarize a boolean incidence matrix for a log record.

    Matrices with more than ``max_size`` cells are hashed; smaller ones are
    inlined as the item ids of each row.
    """
    snapshot: Dict[str, Any] = {
        "shape": matrix.shape,
        "density": float(matrix.mean()) if matrix.size else 0.0,
    }
    if matrix.size > max_size:
        snapshot["hash"] = hash_array(matrix)
    else:
        snapshot["rows"] = [np.flatnonzero(row).tolist() for row in matrix]
    return snapshot


def configure_structlog(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure structlog for the application.

    Records go to stderr, or are appended to ``log_file`` when given.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
    """
    target = {"filename": log_file, "filemode": "a"} if log_file else {"stream": sys.stderr}
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        force=True,
        **target,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class InstrumentedLogger:
    """
    Logger with matrix snapshots and memory tracking for discovery runs.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)

    def log_data_snapshot(
        self,
        stage: str,
        matrix: np.ndarray,
        metadata: Optional[Dict] = None
    ):
        """
        Log a snapshot of the incidence matrix entering a stage.

        Args:
            stage: Stage name (e.g., "discovery_started")
            matrix: Boolean incidence matrix (hashed when large)
            metadata: Additional metadata to log
        """
        log_data = {
            "memory_mb": get_memory_usage(),
            "data": incidence_snapshot(matrix),
        }

        if metadata:
            log_data.update(metadata)

        self.logger.info(stage, **log_data)

    def log_run_summary(self, stage: str, metadata: Dict[str, Any]):
        """
        Log the end-of-run summary with current memory usage.

        Args:
            stage: Stage name (e.g., "discovery_stopped")
            metadata: Run statistics
        """
        self.logger.info(stage, memory_mb=get_memory_usage(), **metadata)
