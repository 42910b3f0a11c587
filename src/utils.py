"""
Shared utility functions for Pocket.

Path helpers for the app data directory and the files in it.
"""

import sys
from pathlib import Path


def get_app_dir() -> Path:
    """Get the application data directory."""
    if getattr(sys, 'frozen', False):
        # Running as compiled
        app_dir = Path(sys.executable).parent / "data"
    else:
        # Running as script
        app_dir = Path(__file__).parent.parent / "data"

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def is_frozen() -> bool:
    """True when running as a packaged executable."""
    return bool(getattr(sys, 'frozen', False))


def get_settings_path() -> Path:
    """Get path to settings file."""
    return get_app_dir() / "settings.json"


def get_metadata_path() -> Path:
    """Get path to the plain wallet metadata file."""
    return get_app_dir() / "wallet-metadata.json"


def get_logs_dir() -> Path:
    """Get the logs directory."""
    logs_dir = get_app_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir
