"""
Export Passphrase Gate - Re-authorization before the private key is shown.

The passphrase is never stored. An Argon2id hash of it is kept in wallet
metadata and compared in constant time.
"""

import hmac
import logging
import secrets

from argon2.low_level import hash_secret_raw, Type

from errors import ReauthorizationRequired
from storage.metadata import PASSPHRASE_HASH_KEY

from .manager import WalletManager

logger = logging.getLogger(__name__)


# Argon2id parameters (OWASP recommendations for high-security)
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_PARALLELISM = 4
ARGON2_HASH_LEN = 32

SALT_SIZE = 16


def hash_passphrase(passphrase: str, salt: bytes,
                    time_cost: int = ARGON2_TIME_COST,
                    memory_cost: int = ARGON2_MEMORY_COST,
                    parallelism: int = ARGON2_PARALLELISM) -> bytes:
    """
    Hash a passphrase with Argon2id.

    Each guess costs ~64MB RAM with the default parameters.
    """
    return hash_secret_raw(
        secret=passphrase.encode('utf-8'),
        salt=salt,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID
    )


class PassphraseGate:
    """
    Guards private key export behind a passphrase.

    The hash lives in the manager's metadata store and every access holds
    the manager's lock, so it cannot interleave with remove() or a reset.

    Usage:
        gate = PassphraseGate(manager)
        gate.set_passphrase("correct horse")
        key = gate.export_private_key("correct horse")
    """

    def __init__(self, manager: WalletManager,
                 time_cost: int = ARGON2_TIME_COST,
                 memory_cost: int = ARGON2_MEMORY_COST,
                 parallelism: int = ARGON2_PARALLELISM):
        self.manager = manager
        self.metadata = manager.metadata
        self.time_cost = time_cost
        self.memory_cost = memory_cost
        self.parallelism = parallelism

    def _hash(self, passphrase: str, salt: bytes, params: dict) -> bytes:
        return hash_passphrase(
            passphrase,
            salt,
            time_cost=params.get("time_cost", self.time_cost),
            memory_cost=params.get("memory_cost", self.memory_cost),
            parallelism=params.get("parallelism", self.parallelism),
        )

    def set_passphrase(self, passphrase: str) -> None:
        """Set (or replace) the export passphrase."""
        if not passphrase:
            raise ValueError("Passphrase must not be empty")

        salt = secrets.token_bytes(SALT_SIZE)
        params = {
            "algorithm": "argon2id",
            "time_cost": self.time_cost,
            "memory_cost": self.memory_cost,
            "parallelism": self.parallelism,
        }
        digest = self._hash(passphrase, salt, params)
        with self.manager.lock:
            self.metadata.set(PASSPHRASE_HASH_KEY, {**params, "salt": salt.hex(), "hash": digest.hex()})
        logger.info("Export passphrase updated")

    def has_passphrase(self) -> bool:
        with self.manager.lock:
            return bool(self.metadata.get(PASSPHRASE_HASH_KEY))

    def verify(self, passphrase: str) -> None:
        """
        Check the passphrase.

        Raises:
            ReauthorizationRequired: empty, wrong, or no passphrase set
        """
        with self.manager.lock:
            record = self.metadata.get(PASSPHRASE_HASH_KEY)
        if not record:
            raise ReauthorizationRequired("No export passphrase has been set")
        if not passphrase:
            raise ReauthorizationRequired("Please enter your wallet password")

        try:
            salt = bytes.fromhex(record["salt"])
            expected = bytes.fromhex(record["hash"])
        except (KeyError, TypeError, ValueError) as e:
            raise ReauthorizationRequired("Stored passphrase record is unreadable") from e

        actual = self._hash(passphrase, salt, record)
        if not hmac.compare_digest(actual, expected):
            logger.warning("Export passphrase check failed")
            raise ReauthorizationRequired("Incorrect password")

    def export_private_key(self, passphrase: str) -> str:
        """Verify the passphrase, then export the private key from the manager."""
        self.verify(passphrase)
        return self.manager.export_private_key()
