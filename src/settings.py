"""
Settings - User-editable configuration persisted in settings.json.
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from utils import get_settings_path

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings with defaults for a fresh install."""
    credential_identifier: str = "walletPrivateKey"
    keyring_service: str = "pocket-wallet"
    log_level: str = "INFO"
    log_retention_days: int = 7   # 0 = console only

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings, ignoring unknown keys from older/newer versions."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        """Load settings from disk. Missing or unreadable files give defaults."""
        settings_path = Path(path) if path else get_settings_path()
        if settings_path.exists():
            try:
                with open(settings_path, 'r') as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return cls.from_dict(data)
                logger.warning("Failed to load settings: expected a JSON object")
            except Exception as e:
                logger.warning(f"Failed to load settings: {e}")
        return cls()

    def save(self, path: Optional[Path] = None) -> None:
        """Save settings to disk."""
        settings_path = Path(path) if path else get_settings_path()
        try:
            with open(settings_path, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)
        except Exception as e:
            logger.error(f"Failed to save settings: {e}")

    @property
    def level(self) -> int:
        """log_level as a logging module constant (INFO if unrecognised)."""
        level = logging.getLevelName(str(self.log_level).upper())
        return level if isinstance(level, int) else logging.INFO
