"""
User-facing text for wallet errors.

Text is chosen by exception type, never by inspecting the message.
"""

from errors import (
    EmptyImportInput,
    InconsistentState,
    InvalidPrivateKey,
    InvalidPrivateKeyFormat,
    InvalidSeedPhrase,
    InvalidSeedPhraseLength,
    ReauthorizationRequired,
    StorageUnavailable,
    WalletAlreadyExists,
    WalletError,
    WalletNotFound,
    WalletValidationError,
)


GENERIC_MESSAGE = "Something went wrong. Please try again."

ERROR_MESSAGES: dict[type, str] = {
    InvalidPrivateKeyFormat: "Private key must be 64 hex characters starting with 0x.",
    InvalidSeedPhraseLength: "Seed phrase must be 12 or 24 words long.",
    InvalidPrivateKey: "Invalid private key. Please check your input and try again.",
    InvalidSeedPhrase: "Invalid seed phrase. Please check your words and try again.",
    WalletValidationError: "Invalid credentials. Please check your input and try again.",
    StorageUnavailable: "Your wallet could not be saved securely on this device. Please try again.",
    InconsistentState: (
        "Your wallet data is incomplete and the private key cannot be recovered. "
        "Please import your wallet again."
    ),
    WalletAlreadyExists: "A wallet already exists on this device. Remove it before adding another.",
    WalletNotFound: "No wallet found on this device.",
    ReauthorizationRequired: "Incorrect password. Please try again.",
    WalletError: GENERIC_MESSAGE,
}


def user_message(error: BaseException) -> str:
    """Display text for an error, using the most specific known type."""
    if isinstance(error, EmptyImportInput):
        # Message already names what is missing ("Please enter a seed phrase")
        return str(error)
    for cls in type(error).__mro__:
        if cls in ERROR_MESSAGES:
            return ERROR_MESSAGES[cls]
    return GENERIC_MESSAGE
