"""
Metadata Store - Non-secret wallet fields in the plain key-value store.

Only the wallet manager writes here. The private key fallback key is
reserved for the plain credential tier and cannot be set through this class.
"""

import logging
from typing import Any, Iterable, Optional

from .kv import JsonKeyValueStore

logger = logging.getLogger(__name__)


ADDRESS_KEY = "walletAddress"
BALANCE_KEY = "walletBalance"
TOKENS_KEY = "walletTokens"
TRANSACTIONS_KEY = "walletTransactions"
NETWORK_KEY = "walletNetwork"
PASSPHRASE_HASH_KEY = "walletPassphraseHash"

# Written only by storage.credentials.PlainStoreTier
FALLBACK_SECRET_KEY = "walletPrivateKey_fallback"

CACHE_KEYS = (BALANCE_KEY, TOKENS_KEY, TRANSACTIONS_KEY, NETWORK_KEY)

WALLET_KEYS = (ADDRESS_KEY,) + CACHE_KEYS + (PASSPHRASE_HASH_KEY,)


class MetadataStore:
    """Wallet metadata under a fixed set of namespaced keys."""

    def __init__(self, kv: JsonKeyValueStore):
        self.kv = kv

    def set(self, key: str, value: Any) -> None:
        if key not in WALLET_KEYS:
            raise KeyError(f"Not a wallet metadata key: {key}")
        self.kv.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        return self.kv.get(key)

    def remove_many(self, keys: Iterable[str]) -> None:
        self.kv.remove_many(keys)

    def clear_wallet(self) -> None:
        """Remove every wallet key, including the fallback secret."""
        self.kv.remove_many(WALLET_KEYS + (FALLBACK_SECRET_KEY,))

    def remove_all(self) -> None:
        """Remove everything in the underlying store, wallet or not."""
        logger.info(f"Clearing {len(self.kv.keys())} key(s) from plain storage")
        self.kv.remove_all()

    def keys(self) -> list[str]:
        return self.kv.keys()

    @property
    def address(self) -> Optional[str]:
        """The stored wallet address, if any."""
        return self.get(ADDRESS_KEY)
