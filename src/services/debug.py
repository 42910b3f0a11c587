"""
Debug Reset - Development-only wallet wipes.

Both hooks check is_dev_build() first and do nothing else in release builds.
"""

import logging

import buildinfo
from utils import is_frozen

logger = logging.getLogger(__name__)


def is_dev_build() -> bool:
    """True only for development builds running from source."""
    return buildinfo.DEV_BUILD is True and not is_frozen()


def auto_wipe_on_start(manager) -> bool:
    """
    Remove any stored wallet. Run once at startup, before load().

    Returns True if the wallet data was wiped.
    """
    if not is_dev_build():
        return False

    logger.warning("DEV BUILD: auto-clearing wallet data for testing")
    try:
        manager.remove()
    except Exception:
        # Startup continues; the next load() reports whatever is left
        logger.exception("DEV BUILD: auto-clear failed")
        return False
    logger.info("DEV BUILD: wallet data auto-cleared")
    return True


def debug_clear_all_data(manager) -> list[str]:
    """
    Wipe all plain storage (wallet and non-wallet keys) and every credential tier.

    Returns the plain storage keys that were cleared.

    Raises:
        RuntimeError: called in a release build
    """
    if not is_dev_build():
        raise RuntimeError("debug_clear_all_data is only available in development builds")

    logger.warning("DEV BUILD: clearing all app data")
    cleared = manager.reset_storage()
    logger.info(f"DEV BUILD: cleared keys: {', '.join(cleared) or '(none)'}")
    return cleared
