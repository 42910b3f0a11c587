"""
Storage package - Where wallet data lives on the device.

Contains:
- JsonKeyValueStore: plain JSON key-value file
- MetadataStore: non-secret wallet fields under fixed keys
- CredentialStore: private key behind keyring / keyring / plain-file tiers
"""

from .kv import JsonKeyValueStore, KeyValueStoreError
from .metadata import (
    MetadataStore,
    ADDRESS_KEY,
    BALANCE_KEY,
    TOKENS_KEY,
    TRANSACTIONS_KEY,
    NETWORK_KEY,
    PASSPHRASE_HASH_KEY,
    FALLBACK_SECRET_KEY,
    WALLET_KEYS,
    CACHE_KEYS,
)
from .credentials import (
    CredentialStore,
    CredentialTier,
    StoredCredential,
    KeyringInternetTier,
    KeyringGenericTier,
    PlainStoreTier,
)

__all__ = [
    "JsonKeyValueStore",
    "KeyValueStoreError",
    "MetadataStore",
    "ADDRESS_KEY",
    "BALANCE_KEY",
    "TOKENS_KEY",
    "TRANSACTIONS_KEY",
    "NETWORK_KEY",
    "PASSPHRASE_HASH_KEY",
    "FALLBACK_SECRET_KEY",
    "WALLET_KEYS",
    "CACHE_KEYS",
    "CredentialStore",
    "CredentialTier",
    "StoredCredential",
    "KeyringInternetTier",
    "KeyringGenericTier",
    "PlainStoreTier",
]
