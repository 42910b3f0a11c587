"""
Services package - App-wide services for Pocket.

Contains:
- logging: console/file logging with secret redaction
- debug: development-only wallet wipes
"""

from .logging import configure_logging, cleanup_old_logs, RedactSecretsFilter
from .debug import is_dev_build, auto_wipe_on_start, debug_clear_all_data

__all__ = [
    "configure_logging",
    "cleanup_old_logs",
    "RedactSecretsFilter",
    "is_dev_build",
    "auto_wipe_on_start",
    "debug_clear_all_data",
]
