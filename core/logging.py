"""
Logging configuration for tagscan using loguru.

Console output is plain human-readable lines on stdout. An optional log file
receives the detailed format, with structured context bound by the helpers
below.
"""

import sys
from loguru import logger
from pathlib import Path

CONSOLE_FORMAT = "{message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_logging(log_level: str = "INFO", log_file: str = None) -> None:
    """
    Set up loguru logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to (always logs to stdout as well)
    """
    logger.remove()

    logger.add(sys.stdout, level=log_level.upper(), format=CONSOLE_FORMAT, colorize=False)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            rotation="10 MB",
            retention=5,
            level="DEBUG",
            format=FILE_FORMAT,
            enqueue=False,
        )

    logger.bind(log_level=log_level, log_file=log_file or "stdout").debug("Logging configured")


def log_file_operation(operation: str, filepath: str, message: str = None, **context):
    """
    Log file operations with context.

    Args:
        operation: File operation type (read, estimate, scan, etc.)
        filepath: Path to the file
        message: Human-readable line (default: "<operation>: <filepath>")
        **context: Additional context data
    """
    logger.bind(operation=operation, filepath=str(filepath), **context).info(
        message or f"{operation}: {filepath}"
    )


def log_error(error: Exception, **context):
    """
    Log errors with context.

    Args:
        error: Exception that occurred
        **context: Additional context data
    """
    logger.bind(error_type=type(error).__name__, **context).error(f"Error {error}")


def log_scan_summary(stats, elapsed_ms: float):
    """
    Log the structured summary of a finished pass.

    Args:
        stats: ScanStats of the pass
        elapsed_ms: Duration of the pass in milliseconds
    """
    mode = "estimate" if stats.estimate else "scan"
    logger.bind(mode=mode, elapsed_ms=round(elapsed_ms, 2), **stats.summary()).debug(
        f"Finished {mode} pass in {elapsed_ms:.0f} ms"
    )
