"""
Wallet Keys - Build a WalletIdentity from fresh entropy, a seed phrase or a raw key.

Every path validates the input shape first and only then hands it to the
crypto libraries, so a malformed input always produces a specific error:

- generate_new: BIP-39 mnemonic -> BIP-44 key at index 0
- from_private_key: 0x + 64 hex -> Account.from_key
- from_seed_phrase: 12 or 24 words -> wordlist/checksum -> BIP-44 key at index 0
"""

import re
from enum import Enum

from mnemonic import Mnemonic
from eth_account import Account
from eth_account.hdaccount import seed_from_mnemonic, key_from_seed

from errors import (
    EmptyImportInput,
    InvalidPrivateKey,
    InvalidPrivateKeyFormat,
    InvalidSeedPhrase,
    InvalidSeedPhraseLength,
)
from .identity import WalletIdentity

# Enable HD wallet features
Account.enable_unaudited_hdwallet_features()


# BIP-44 derivation path for the first Ethereum account
ETH_DERIVATION_PATH = "m/44'/60'/0'/0/0"

# Words in a supported mnemonic -> bits of entropy
ENTROPY_BITS = {12: 128, 24: 256}
SEED_WORD_COUNTS = tuple(ENTROPY_BITS)

PRIVATE_KEY_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


class ImportMethod(str, Enum):
    """How the user supplies an existing wallet."""
    PRIVATE_KEY = "privateKey"
    SEED_PHRASE = "seedPhrase"


def validate_private_key(private_key: str) -> bool:
    """Check that the (trimmed) input is 0x followed by 64 hex digits."""
    return bool(PRIVATE_KEY_PATTERN.match(private_key.strip()))


def validate_seed_phrase(seed_phrase: str) -> bool:
    """Check that the (trimmed) input has exactly 12 or 24 words."""
    return len(seed_phrase.split()) in SEED_WORD_COUNTS


def _derive_from_phrase(phrase: str) -> WalletIdentity:
    seed = seed_from_mnemonic(phrase, passphrase="")
    private_key = key_from_seed(seed, ETH_DERIVATION_PATH)
    account = Account.from_key(private_key)
    return WalletIdentity(
        address=account.address,
        private_key="0x" + bytes(private_key).hex(),
        mnemonic=phrase,
    )


def generate_new(word_count: int = 12) -> WalletIdentity:
    """
    Create a brand new identity from fresh entropy.

    Args:
        word_count: 12 (128-bit) or 24 (256-bit) word mnemonic

    Returns:
        WalletIdentity with the mnemonic populated
    """
    if word_count not in ENTROPY_BITS:
        raise ValueError("word_count must be 12 or 24")

    phrase = Mnemonic("english").generate(strength=ENTROPY_BITS[word_count])
    return _derive_from_phrase(phrase)


def from_private_key(private_key: str) -> WalletIdentity:
    """
    Build an identity from a raw hex private key.

    Raises:
        InvalidPrivateKeyFormat: input is not 0x + 64 hex digits
        InvalidPrivateKey: the key is not a valid secp256k1 scalar
    """
    pkey = private_key.strip()
    if not PRIVATE_KEY_PATTERN.match(pkey):
        raise InvalidPrivateKeyFormat(
            "Private key must start with '0x' and be followed by 64 hex characters"
        )

    pkey_bytes = bytes.fromhex(pkey[2:])
    try:
        account = Account.from_key(pkey_bytes)
    except Exception as e:
        raise InvalidPrivateKey("Private key was rejected by key derivation") from e

    return WalletIdentity(address=account.address, private_key="0x" + pkey_bytes.hex())


def from_seed_phrase(seed_phrase: str) -> WalletIdentity:
    """
    Build an identity from a BIP-39 seed phrase.

    Raises:
        InvalidSeedPhraseLength: not exactly 12 or 24 words
        InvalidSeedPhrase: unknown word or bad checksum
    """
    words = seed_phrase.split()
    if len(words) not in SEED_WORD_COUNTS:
        raise InvalidSeedPhraseLength(
            f"Seed phrase must be 12 or 24 words, got {len(words)}"
        )

    phrase = " ".join(word.lower() for word in words)

    mnemo = Mnemonic("english")
    if not mnemo.check(phrase):
        raise InvalidSeedPhrase("Seed phrase failed wordlist or checksum validation")

    try:
        return _derive_from_phrase(phrase)
    except Exception as e:
        raise InvalidSeedPhrase("Seed phrase was rejected by key derivation") from e


def import_identity(method: ImportMethod | str, text: str) -> WalletIdentity:
    """Dispatch an import to the private key or seed phrase path."""
    method = ImportMethod(method)
    if not text or not text.strip():
        kind = "private key" if method is ImportMethod.PRIVATE_KEY else "seed phrase"
        raise EmptyImportInput(f"Please enter a {kind}")

    if method is ImportMethod.PRIVATE_KEY:
        return from_private_key(text)
    return from_seed_phrase(text)
