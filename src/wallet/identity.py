"""
Wallet Identity - The address / private key / mnemonic triple.
"""

from dataclasses import dataclass, field
from typing import Optional


PRIVATE_KEY_LENGTH = 66  # 0x + 64 hex digits


def format_address(address: str, chars: int = 4) -> str:
    """Format address as 0x1234...5678"""
    if len(address) <= chars * 2 + 2:
        return address
    return f"{address[:chars+2]}...{address[-chars:]}"


def mask_secret(secret: str, visible: int = 4) -> str:
    """
    Mask a secret for display, keeping only the last few characters.

    0xabc...def -> 0x••••...••••cdef (same length as the input)
    """
    if not secret:
        return ""
    prefix = "0x" if secret.startswith("0x") else ""
    body = secret[len(prefix):]
    if len(body) <= visible:
        return prefix + "•" * len(body)
    return prefix + "•" * (len(body) - visible) + body[-visible:]


@dataclass(frozen=True)
class WalletIdentity:
    """One account: checksummed address, private key and optional mnemonic."""
    address: str
    private_key: str = field(repr=False)
    mnemonic: Optional[str] = field(default=None, repr=False)

    @property
    def display_address(self) -> str:
        """Short form of the address for display."""
        return format_address(self.address)

    @property
    def masked_private_key(self) -> str:
        return mask_secret(self.private_key)

    @property
    def word_count(self) -> int:
        """Number of words in the mnemonic (0 for raw key imports)."""
        return len(self.mnemonic.split()) if self.mnemonic else 0
