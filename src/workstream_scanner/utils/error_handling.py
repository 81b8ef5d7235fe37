"""Standardized error handling utilities."""

import functools
import logging
from typing import TypeVar, Callable, Optional

logger = logging.getLogger(__name__)

T = TypeVar('T')


def log_and_ignore(
    error: Exception,
    message: str,
    *,
    logger_instance: Optional[logging.Logger] = None,
    level: int = logging.WARNING,
) -> None:
    """
    Log an error and ignore it (don't re-raise).

    Use for non-critical errors that should not interrupt the flow, such as
    an unreadable subtree during a scan.

    Args:
        error: Exception to log
        message: Context message to log
        logger_instance: Logger to use (defaults to module logger)
        level: Log level (default: WARNING)
    """
    log = logger_instance or logger
    log.log(level, f"{message}: {error}")


def handle_filesystem_errors(
    operation: str,
    *,
    logger_instance: Optional[logging.Logger] = None,
) -> Callable:
    """
    Decorator to handle common filesystem errors with consistent messaging.

    Errors are logged and re-raised; callers decide whether they are fatal.

    Args:
        operation: Description of the operation (e.g., "write report")
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        Decorator function
    """
    log = logger_instance or logger

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except PermissionError as e:
                log.error(f"Permission denied during {operation}: {e}")
                raise
            except FileNotFoundError as e:
                log.error(f"File not found during {operation}: {e}")
                raise
            except OSError as e:
                # Disk full, read-only filesystem, etc.
                log.error(f"OS error during {operation}: {e}")
                raise

        return wrapper

    return decorator


class ErrorContext:
    """
    Context manager for handling errors with consistent logging.

    Usage:
        with ErrorContext("syncing label 'priority:high'", raise_on_error=False) as ctx:
            backend.update_label(label)
        if ctx.error is not None:
            ...
    """

    def __init__(
        self,
        operation: str,
        *,
        raise_on_error: bool = True,
        logger_instance: Optional[logging.Logger] = None,
        log_level: int = logging.ERROR,
    ):
        self.operation = operation
        self.raise_on_error = raise_on_error
        self.logger = logger_instance or logger
        self.log_level = log_level
        self.error: Optional[Exception] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and issubclass(exc_type, Exception):
            self.error = exc_val
            self.logger.log(
                self.log_level,
                f"Error during {self.operation}: {exc_val}",
            )
            return not self.raise_on_error
        return False
