"""
Wallet Manager - Lifecycle of the single stored wallet.

Manages create/import/load/export/remove over two stores:
- MetadataStore: the wallet address and cached non-secret data
- CredentialStore: the private key (address as username)

The address is always written before the secret, so a failed secret
write has exactly one thing to roll back.
"""

import logging
import threading
from enum import Enum
from typing import Any, Optional

from errors import (
    InconsistentState,
    StorageUnavailable,
    WalletAlreadyExists,
    WalletNotFound,
)
from storage.credentials import CredentialStore, StoredCredential
from storage.kv import KeyValueStoreError
from storage.metadata import ADDRESS_KEY, CACHE_KEYS, MetadataStore

from . import keys
from .identity import WalletIdentity, format_address
from .keys import ImportMethod

logger = logging.getLogger(__name__)


class WalletState(Enum):
    ABSENT = "absent"
    PRESENT = "present"


class WalletManager:
    """
    Owns the stored wallet. At most one wallet is stored at a time.

    All operations are serialized by one lock, so a second create() racing
    the first waits for it and then fails with WalletAlreadyExists.

    Usage:
        manager = WalletManager(credentials, metadata)
        if manager.load() is WalletState.ABSENT:
            identity = manager.create()
            show_backup(identity.mnemonic)
    """

    def __init__(self, credentials: CredentialStore, metadata: MetadataStore):
        self.credentials = credentials
        self.metadata = metadata
        self._lock = threading.Lock()
        self._state = WalletState.ABSENT
        self._address: Optional[str] = None

    @property
    def lock(self) -> threading.Lock:
        """Lock serializing every access to the wallet stores."""
        return self._lock

    @property
    def state(self) -> WalletState:
        return self._state

    @property
    def address(self) -> Optional[str]:
        """Checksummed address of the loaded wallet, if any."""
        return self._address

    @property
    def has_wallet(self) -> bool:
        return self._state is WalletState.PRESENT

    @property
    def display_address(self) -> str:
        return format_address(self._address) if self._address else ""

    # ============================================
    # State helpers (call with the lock held)
    # ============================================

    def _set_present(self, address: str) -> None:
        self._state = WalletState.PRESENT
        self._address = address

    def _set_absent(self) -> None:
        self._state = WalletState.ABSENT
        self._address = None

    def _read_address(self) -> Optional[str]:
        return self.metadata.get(ADDRESS_KEY) or None

    def _matching_credential(self, address: str) -> Optional[StoredCredential]:
        """The stored credential, if it belongs to the given address."""
        credential = self.credentials.get_secret()
        if credential is None:
            return None
        if credential.username != address:
            logger.error(
                f"Stored key belongs to {format_address(credential.username)}, "
                f"not {format_address(address)}"
            )
            return None
        return credential

    def _ensure_no_wallet(self) -> None:
        """Refuse to overwrite a consistent wallet. A half-stored one may be replaced."""
        address = self._read_address()
        if address is None:
            return
        if self._matching_credential(address) is not None:
            raise WalletAlreadyExists(f"Wallet {format_address(address)} is already stored")
        logger.warning(
            f"Replacing wallet record {format_address(address)} that has no stored key"
        )

    def _drop_address(self) -> None:
        try:
            self.metadata.remove_many([ADDRESS_KEY])
        except KeyValueStoreError:
            logger.exception("Failed to remove wallet address")

    def _persist(self, identity: WalletIdentity) -> None:
        """Write address then secret, verify, and undo the address on failure."""
        if not self.credentials.clear_secret():
            logger.warning("Stale wallet key could not be cleared from every tier")

        try:
            self.metadata.set(ADDRESS_KEY, identity.address)
        except KeyValueStoreError as e:
            raise StorageUnavailable("Failed to store wallet address") from e

        try:
            self.credentials.set_secret(identity.address, identity.private_key)
        except StorageUnavailable:
            self._drop_address()
            raise

        stored = self.credentials.get_secret()
        if (stored is None or stored.username != identity.address
                or stored.secret != identity.private_key):
            logger.error("Wallet key did not read back after write, rolling back")
            self.credentials.clear_secret()
            self._drop_address()
            raise StorageUnavailable("Wallet key could not be verified after storing")

    # ============================================
    # Lifecycle operations
    # ============================================

    def create(self, word_count: int = 12) -> WalletIdentity:
        """
        Create and store a brand new wallet.

        Returns the identity so the caller can show the mnemonic for backup.

        Raises:
            WalletAlreadyExists: a wallet is already stored
            StorageUnavailable: the wallet could not be stored
        """
        with self._lock:
            self._ensure_no_wallet()
            identity = keys.generate_new(word_count)
            self._persist(identity)
            self._set_present(identity.address)
            logger.info(f"Created wallet {identity.display_address}")
            return identity

    def import_wallet(self, method: ImportMethod | str, text: str) -> WalletIdentity:
        """
        Import and store a wallet from a private key or seed phrase.

        Raises:
            WalletValidationError subclasses: input rejected, nothing stored
            WalletAlreadyExists: a wallet is already stored
            StorageUnavailable: the wallet could not be stored
        """
        with self._lock:
            self._ensure_no_wallet()
            identity = keys.import_identity(method, text)
            self._persist(identity)
            self._set_present(identity.address)
            logger.info(f"Imported wallet {identity.display_address} ({ImportMethod(method).value})")
            return identity

    def load(self) -> WalletState:
        """
        Read the stored wallet into memory.

        Raises:
            InconsistentState: an address is stored but its key is missing;
                the wallet is treated as absent and must be re-imported
        """
        with self._lock:
            address = self._read_address()
            if address is None:
                self._set_absent()
                if self.credentials.get_secret() is not None:
                    logger.warning("Found a stored wallet key with no wallet address")
                return self._state

            if self._matching_credential(address) is None:
                self._set_absent()
                logger.error(
                    f"Wallet {format_address(address)} has no retrievable key, treating as absent"
                )
                raise InconsistentState(
                    f"Wallet {format_address(address)} is stored without its private key"
                )

            self._set_present(address)
            return self._state

    def export_private_key(self) -> str:
        """
        Return the stored private key.

        Does not check a passphrase; see wallet.reauth.PassphraseGate.
        The key is not kept in memory after this call.

        Raises:
            WalletNotFound: no wallet is stored
            InconsistentState: the address is stored but its key is not
        """
        with self._lock:
            address = self._read_address()
            if address is None:
                raise WalletNotFound("No wallet to export")

            credential = self._matching_credential(address)
            if credential is None:
                self._set_absent()
                logger.error(f"Export failed, wallet {format_address(address)} has no retrievable key")
                raise InconsistentState(
                    f"Wallet {format_address(address)} is stored without its private key"
                )

            logger.info(f"Private key exported for {format_address(address)} from {credential.tier}")
            return credential.secret

    def remove(self) -> None:
        """
        Remove the wallet from every store.

        Metadata and every credential tier are cleared independently. Only
        a wallet address left behind counts as failure; a key left in some
        tier is logged.

        Raises:
            StorageUnavailable: the wallet address could not be removed
        """
        with self._lock:
            try:
                self.metadata.clear_wallet()
            except KeyValueStoreError:
                logger.exception("Failed to clear wallet metadata")
                self._drop_address()

            if not self.credentials.clear_secret():
                logger.error("Wallet key could not be cleared from every storage tier")

            self._set_absent()
            if self._read_address() is not None:
                raise StorageUnavailable("Failed to remove wallet data")
            logger.info("Wallet data removed")

    def reset_storage(self) -> list[str]:
        """
        Remove every key from plain storage and clear every credential tier.

        Returns the plain storage keys that were present.
        """
        with self._lock:
            cleared = self.metadata.keys()
            try:
                self.metadata.remove_all()
            finally:
                if not self.credentials.clear_secret():
                    logger.error("Wallet key could not be cleared from every storage tier")
                self._set_absent()
            return cleared

    # ============================================
    # Cached wallet data
    # ============================================

    def cache_set(self, key: str, value: Any) -> None:
        """Cache non-secret wallet data (balance, tokens, transactions, network)."""
        if key not in CACHE_KEYS:
            raise KeyError(f"Not a cacheable wallet key: {key}")
        with self._lock:
            self.metadata.set(key, value)

    def cache_get(self, key: str) -> Optional[Any]:
        if key not in CACHE_KEYS:
            raise KeyError(f"Not a cacheable wallet key: {key}")
        with self._lock:
            return self.metadata.get(key)
