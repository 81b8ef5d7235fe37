"""Rich logging with scan context and better formatting."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "workstream_scanner"


class ScanLogFormatter(logging.Formatter):
    """Custom formatter with scan and pattern context."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with context."""
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        scan_context = ""
        if hasattr(record, "scan"):
            scan_context = f"[{record.scan}] "

        pattern_context = ""
        if hasattr(record, "pattern"):
            pattern_context = f"[{record.pattern!r}] "

        if self.use_colors:
            level_colors = {
                "DEBUG": "\033[36m",      # Cyan
                "INFO": "\033[32m",       # Green
                "WARNING": "\033[33m",    # Yellow
                "ERROR": "\033[31m",      # Red
                "CRITICAL": "\033[35m",   # Magenta
            }
            reset = "\033[0m"
            level_color = level_colors.get(record.levelname, "")
        else:
            level_color = ""
            reset = ""

        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        return (
            f"{timestamp} {level_color}{record.levelname:8s}{reset} "
            f"{scan_context}{pattern_context}{message}"
        )


class ScanContextLogger(logging.LoggerAdapter):
    """Logger adapter that adds scan context to all log messages."""

    def __init__(self, logger: logging.Logger, scan_name: str):
        super().__init__(logger, {})
        self.scan_name = scan_name
        self.current_pattern: Optional[str] = None

    def set_pattern(self, pattern: Optional[str]):
        """Set (or clear with None) the pattern currently being searched."""
        self.current_pattern = pattern

    def process(self, msg, kwargs):
        """Add context to log record."""
        extra = kwargs.get("extra", {})
        extra["scan"] = self.scan_name
        if self.current_pattern is not None:
            extra["pattern"] = self.current_pattern
        kwargs["extra"] = extra
        return msg, kwargs

    def scan_started(self, root: Path):
        self.info(f"Scanning {root}")

    def pattern_started(self, pattern: str):
        self.set_pattern(pattern)
        self.debug("Searching")

    def pattern_finished(self, match_count: int):
        self.debug(f"{match_count} matching lines")
        self.set_pattern(None)

    def scan_completed(self, file_count: int, bucket_count: int, duration_seconds: float):
        """Log scan completion with counts."""
        self.set_pattern(None)
        if file_count:
            self.info(
                f"Found {file_count} files across {bucket_count} groups "
                f"in {duration_seconds:.2f}s"
            )
        else:
            self.info(f"No findings ({duration_seconds:.2f}s)")

    def report_written(self, path: Path):
        self.info(f"Report written to {path}")


def get_scan_logger(scan_name: str) -> ScanContextLogger:
    """Return a context logger for one scan, under the package logger."""
    return ScanContextLogger(logging.getLogger(f"{ROOT_LOGGER_NAME}.scan"), scan_name)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    use_colors: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure the package logger for CLI use.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Also write plain (uncoloured) records to this file
        use_colors: Force colours on/off; defaults to whether stderr is a TTY

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Close existing handlers before clearing (prevents file descriptor leak)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    if use_colors is None:
        use_colors = sys.stderr.isatty() if hasattr(sys.stderr, "isatty") else False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ScanLogFormatter(use_colors=use_colors))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(ScanLogFormatter(use_colors=False))
        logger.addHandler(file_handler)

    return logger
