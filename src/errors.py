"""
Errors - Typed failures for the wallet lifecycle and its storage.

Validation errors are user-correctable and also subclass ValueError.
Storage and state errors are not fixed by simply retrying the same input.
"""


class WalletError(Exception):
    """Base class for all wallet lifecycle errors."""


class WalletValidationError(WalletError, ValueError):
    """User input was rejected before anything was stored."""


class EmptyImportInput(WalletValidationError):
    """No private key or seed phrase was entered."""


class InvalidPrivateKeyFormat(WalletValidationError):
    """Private key is not 0x followed by 64 hex digits."""


class InvalidSeedPhraseLength(WalletValidationError):
    """Seed phrase does not have exactly 12 or 24 words."""


class InvalidPrivateKey(WalletValidationError):
    """Private key has the right shape but is not a usable secp256k1 scalar."""


class InvalidSeedPhrase(WalletValidationError):
    """Seed phrase has a valid length but failed wordlist or checksum checks."""


class StorageUnavailable(WalletError):
    """Wallet data could not be written (or cleared) on any storage backend."""


class InconsistentState(WalletError):
    """Stored address and stored secret do not describe the same wallet."""


class WalletAlreadyExists(WalletError):
    """A wallet is already stored; it must be removed before another is added."""


class WalletNotFound(WalletError):
    """No wallet is stored."""


class ReauthorizationRequired(WalletError):
    """The passphrase check guarding private key export did not pass."""
