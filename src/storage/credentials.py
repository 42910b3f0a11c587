"""
Credential Store - One (username, secret) pair behind an ordered list of tiers.

Tiers, strongest first:
- KeyringInternetTier: OS credential store, service = account = identifier
- KeyringGenericTier: OS credential store, generic entry under an app service name
- PlainStoreTier: plain JSON key-value file (weak, logged as such)

Writes stop at the first tier that does not raise. Reads return the first
non-empty secret. Clears hit every tier regardless of failures elsewhere.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from errors import StorageUnavailable
from .kv import JsonKeyValueStore
from .metadata import FALLBACK_SECRET_KEY

logger = logging.getLogger(__name__)


DEFAULT_IDENTIFIER = "walletPrivateKey"
DEFAULT_SERVICE_NAME = "pocket-wallet"


@dataclass(frozen=True)
class StoredCredential:
    """A credential read back from one of the tiers."""
    username: str
    secret: str = field(repr=False)
    tier: str = ""


class CredentialTier(ABC):
    """One storage backend for a single credential."""

    name: str = "tier"
    weak: bool = False

    @abstractmethod
    def set(self, identifier: str, username: str, secret: str) -> None:
        """Store the credential. Raises on failure."""

    @abstractmethod
    def get(self, identifier: str) -> Optional[StoredCredential]:
        """Return the credential, or None when nothing is stored. Raises on failure."""

    @abstractmethod
    def clear(self, identifier: str) -> None:
        """Delete the credential. Nothing stored is not an error."""


def _encode_payload(username: str, secret: str) -> str:
    return json.dumps({"username": username, "secret": secret})


def _decode_payload(raw: str, tier: str) -> Optional[StoredCredential]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Malformed credential payload in {tier}")
    secret = data.get("secret")
    if not secret:
        return None
    return StoredCredential(username=data.get("username", ""), secret=secret, tier=tier)


class KeyringInternetTier(CredentialTier):
    """
    Primary tier: OS credential manager entry of its own, keyed by the identifier.

    Stored as service = account = identifier, password = JSON {username, secret}.
    The account is fixed so every backend can read and delete the entry
    without knowing the wallet address.
    """

    name = "keyring-internet"

    def __init__(self, backend: Optional[KeyringBackend] = None):
        self._backend = backend

    @property
    def backend(self) -> KeyringBackend:
        return self._backend or keyring.get_keyring()

    def set(self, identifier: str, username: str, secret: str) -> None:
        self.backend.set_password(identifier, identifier, _encode_payload(username, secret))

    def get(self, identifier: str) -> Optional[StoredCredential]:
        raw = self.backend.get_password(identifier, identifier)
        if not raw:
            return None
        return _decode_payload(raw, self.name)

    def clear(self, identifier: str) -> None:
        try:
            self.backend.delete_password(identifier, identifier)
        except PasswordDeleteError:
            pass


class KeyringGenericTier(CredentialTier):
    """
    Secondary tier: generic password entry scoped by the app's service name.

    Stored as account = identifier, password = JSON {username, secret}.
    """

    name = "keyring-generic"

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME,
                 backend: Optional[KeyringBackend] = None):
        self.service_name = service_name
        self._backend = backend

    @property
    def backend(self) -> KeyringBackend:
        return self._backend or keyring.get_keyring()

    def set(self, identifier: str, username: str, secret: str) -> None:
        self.backend.set_password(self.service_name, identifier, _encode_payload(username, secret))

    def get(self, identifier: str) -> Optional[StoredCredential]:
        raw = self.backend.get_password(self.service_name, identifier)
        if not raw:
            return None
        return _decode_payload(raw, self.name)

    def clear(self, identifier: str) -> None:
        try:
            self.backend.delete_password(self.service_name, identifier)
        except PasswordDeleteError:
            pass


class PlainStoreTier(CredentialTier):
    """
    Tertiary tier: the plain key-value file.

    The secret is NOT protected by the OS here. It exists so a device
    without a working credential manager can still hold a wallet.
    """

    name = "plain-store"
    weak = True

    def __init__(self, kv: JsonKeyValueStore, key: str = FALLBACK_SECRET_KEY):
        self.kv = kv
        self.key = key

    def set(self, identifier: str, username: str, secret: str) -> None:
        self.kv.set(self.key, {"identifier": identifier, "username": username, "secret": secret})

    def get(self, identifier: str) -> Optional[StoredCredential]:
        data = self.kv.get(self.key)
        if not data:
            return None
        if not isinstance(data, dict):
            raise ValueError(f"Malformed credential payload in {self.name}")
        if data.get("identifier", identifier) != identifier or not data.get("secret"):
            return None
        return StoredCredential(username=data.get("username", ""), secret=data["secret"], tier=self.name)

    def clear(self, identifier: str) -> None:
        self.kv.remove(self.key)


class CredentialStore:
    """
    Single-credential store with tiered fallback.

    Usage:
        store = CredentialStore([KeyringInternetTier(), KeyringGenericTier(), PlainStoreTier(kv)])
        tier = store.set_secret(address, private_key)
        credential = store.get_secret()
        store.clear_secret()
    """

    def __init__(self, tiers: list[CredentialTier], identifier: str = DEFAULT_IDENTIFIER):
        if not tiers:
            raise ValueError("At least one credential tier is required")
        self.tiers = list(tiers)
        self.identifier = identifier
        self.last_tier: Optional[str] = None

    def set_secret(self, username: str, secret: str) -> str:
        """
        Store the credential on the first tier that accepts it.

        Returns:
            Name of the tier that holds the credential

        Raises:
            StorageUnavailable: every tier raised
        """
        for tier in self.tiers:
            try:
                tier.set(self.identifier, username, secret)
            except Exception as e:
                logger.warning(f"Credential write failed on {tier.name}: {type(e).__name__}")
                continue

            if tier.weak:
                logger.warning(f"Secure credential storage unavailable, wallet key stored in {tier.name}")
            else:
                logger.info(f"Wallet key stored in {tier.name}")
            self.last_tier = tier.name
            return tier.name

        logger.error("All credential storage tiers failed")
        raise StorageUnavailable("Failed to store wallet data securely")

    def get_secret(self) -> Optional[StoredCredential]:
        """Return the first stored credential found, or None if no tier has one."""
        for tier in self.tiers:
            try:
                credential = tier.get(self.identifier)
            except Exception as e:
                logger.warning(f"Credential read failed on {tier.name}: {type(e).__name__}")
                continue
            if credential is not None:
                self.last_tier = tier.name
                return credential
        return None

    def clear_secret(self) -> bool:
        """
        Clear the credential from every tier.

        Returns:
            True if every tier cleared without error
        """
        cleared = True
        for tier in self.tiers:
            try:
                tier.clear(self.identifier)
            except Exception as e:
                logger.warning(f"Credential clear failed on {tier.name}: {type(e).__name__}")
                cleared = False
        self.last_tier = None
        return cleared
