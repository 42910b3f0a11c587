"""
Pocket - Non-custodial wallet core

Startup wiring: logging, storage tiers, wallet manager, then load the
stored wallet.

Entry point for the application.
"""

import logging
from pathlib import Path
from typing import Optional

from errors import InconsistentState
from services.debug import auto_wipe_on_start
from services.logging import configure_logging, cleanup_old_logs
from settings import Settings
from storage import (
    CredentialStore,
    JsonKeyValueStore,
    KeyringGenericTier,
    KeyringInternetTier,
    MetadataStore,
    PlainStoreTier,
)
from utils import get_metadata_path
from wallet import WalletManager, WalletState

logger = logging.getLogger(__name__)


def build_wallet_manager(settings: Settings,
                         metadata_path: Optional[Path] = None) -> WalletManager:
    """Wire the credential tiers and metadata store into a WalletManager."""
    kv = JsonKeyValueStore(metadata_path or get_metadata_path())
    credentials = CredentialStore(
        [
            KeyringInternetTier(),
            KeyringGenericTier(service_name=settings.keyring_service),
            PlainStoreTier(kv),
        ],
        identifier=settings.credential_identifier,
    )
    return WalletManager(credentials, MetadataStore(kv))


def startup(settings: Optional[Settings] = None,
            metadata_path: Optional[Path] = None) -> WalletManager:
    """
    Configure logging, build the manager and load the stored wallet.

    An inconsistent wallet is logged and left absent so the user can
    re-import it.
    """
    settings = settings or Settings.load()

    # Configure logging before anything else
    configure_logging(settings.level, settings.log_retention_days)
    if settings.log_retention_days > 0:
        cleanup_old_logs(settings.log_retention_days)

    manager = build_wallet_manager(settings, metadata_path)
    auto_wipe_on_start(manager)

    try:
        manager.load()
    except InconsistentState as e:
        logger.error(f"Stored wallet is unusable: {e}")

    return manager


def main():
    """Application entry point."""
    manager = startup()
    if manager.state is WalletState.PRESENT:
        logger.info(f"Loaded wallet {manager.display_address}")
    else:
        logger.info("Welcome to Pocket • Create or import a wallet to get started")


if __name__ == "__main__":
    main()
