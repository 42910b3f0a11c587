"""
Logging - Application logging configuration and disk persistence.

Provides:
- Python logging configuration with console and optional file output
- Log persistence to daily files: pocket-YYYY-MM-DD.log
- Automatic cleanup of old log files
- Redaction of anything shaped like a private key
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
import logging
import re

from utils import get_logs_dir

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# 0x + 64 hex digits: private keys (and tx hashes, which are harmless to mask)
SECRET_PATTERN = re.compile(r"0x[0-9a-fA-F]{64}")
REDACTED = "0x<redacted>"


class RedactSecretsFilter(logging.Filter):
    """Mask private-key-shaped strings in log records before they are emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = SECRET_PATTERN.sub(REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = None

        # Formatters reuse an existing exc_text
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = SECRET_PATTERN.sub(REDACTED, record.exc_text)
        if record.stack_info:
            record.stack_info = SECRET_PATTERN.sub(REDACTED, record.stack_info)
        return True


def configure_logging(level: int = logging.INFO, retention_days: int = 0) -> None:
    """
    Configure Python logging for the application.

    Sets up a root logger with console output and, when retention_days > 0,
    a file handler writing to today's log file.

    Args:
        level: Logging level (default: INFO)
        retention_days: If 0, don't save to disk
    """
    root_logger = logging.getLogger()

    # Only configure if not already configured
    if root_logger.handlers:
        return

    root_logger.setLevel(level)

    # Console handler with simple format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
    console_handler.addFilter(RedactSecretsFilter())
    root_logger.addHandler(console_handler)

    if retention_days > 0:
        try:
            file_handler = logging.FileHandler(get_log_file_path(), encoding='utf-8')
        except OSError as e:
            root_logger.warning(f"File logging disabled: {e}")
            return
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.addFilter(RedactSecretsFilter())
        root_logger.addHandler(file_handler)


def get_log_file_path(date: Optional[datetime] = None) -> Path:
    """Get the log file path for a specific date (defaults to today)."""
    if date is None:
        date = datetime.now()
    filename = f"pocket-{date.strftime('%Y-%m-%d')}.log"
    return get_logs_dir() / filename


def cleanup_old_logs(retention_days: int) -> int:
    """
    Delete log files older than retention_days.

    Args:
        retention_days: Delete files older than this (0 = delete all)

    Returns:
        Number of files deleted
    """
    if retention_days < 0:
        return 0

    logs_dir = get_logs_dir()
    cutoff_date = datetime.now() - timedelta(days=retention_days)
    deleted_count = 0

    for file_path in logs_dir.glob("pocket-*.log"):
        # Parse date from filename
        try:
            date_str = file_path.stem.replace("pocket-", "")
            file_date = datetime.strptime(date_str, "%Y-%m-%d")

            if file_date < cutoff_date:
                file_path.unlink()
                deleted_count += 1
        except (ValueError, OSError):
            # Skip files that don't match expected format
            pass

    return deleted_count
