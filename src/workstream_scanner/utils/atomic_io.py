"""Atomic file I/O operations."""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(file_path: Path, content: str, max_retries: int = 3) -> None:
    """
    Atomically write text to a file using temp file + rename.

    The target is either fully written or left untouched, so a failed run
    never leaves a partial report behind.

    Args:
        file_path: Target file path
        content: Text to write (UTF-8)
        max_retries: Maximum number of retry attempts on failure

    Raises:
        OSError: If write fails after all retries
    """
    # Use PID to avoid temp file collisions between processes
    tmp_file = file_path.with_suffix(f'{file_path.suffix}.tmp.{os.getpid()}')

    last_error = None
    for attempt in range(max_retries):
        try:
            tmp_file.write_text(content, encoding="utf-8")
            tmp_file.replace(file_path)
            return
        except OSError as e:
            last_error = e
            if attempt < max_retries - 1:
                logger.warning(
                    f"Failed to write {file_path} (attempt {attempt + 1}/{max_retries}): {e}"
                )
            continue
        finally:
            if tmp_file.exists():
                try:
                    tmp_file.unlink()
                except OSError:
                    pass

    logger.error(f"Failed to write {file_path} after {max_retries} attempts: {last_error}")
    raise last_error
