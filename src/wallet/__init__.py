"""
Wallet package - Key material and lifecycle for the single stored wallet.

Contains:
- WalletIdentity: address / private key / mnemonic
- keys: generate, import from private key or seed phrase
- WalletManager: create, import, load, export, remove
- PassphraseGate: re-authorization before export
- user_message: display text for wallet errors
"""

from .identity import WalletIdentity, format_address, mask_secret
from .keys import (
    ImportMethod,
    generate_new,
    from_private_key,
    from_seed_phrase,
    import_identity,
    validate_private_key,
    validate_seed_phrase,
)
from .manager import WalletManager, WalletState
from .reauth import PassphraseGate
from .messages import user_message

__all__ = [
    # Identity
    "WalletIdentity",
    "format_address",
    "mask_secret",
    # Keys
    "ImportMethod",
    "generate_new",
    "from_private_key",
    "from_seed_phrase",
    "import_identity",
    "validate_private_key",
    "validate_seed_phrase",
    # Manager
    "WalletManager",
    "WalletState",
    "PassphraseGate",
    "user_message",
]
