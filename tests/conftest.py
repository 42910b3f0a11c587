import pytest
from keyring.backend import KeyringBackend
from keyring.errors import KeyringLocked, PasswordDeleteError

from storage import (
    CredentialStore,
    CredentialTier,
    JsonKeyValueStore,
    KeyringGenericTier,
    KeyringInternetTier,
    MetadataStore,
    PlainStoreTier,
)
from wallet import WalletManager


class MemoryKeyring(KeyringBackend):
    """
    Keyring backend holding entries in a dict.

    get_credential is inherited, so a lookup without a username finds
    nothing, as on the macOS Keychain backend.
    """

    priority = 0.1

    def __init__(self):
        super().__init__()
        self.entries = {}

    def get_password(self, service, username):
        return self.entries.get((service, username))

    def set_password(self, service, username, password):
        self.entries[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.entries[(service, username)]
        except KeyError:
            raise PasswordDeleteError("Password not found")


class FailingTier(CredentialTier):
    """Tier whose every call raises, recording what was attempted."""

    def __init__(self, name="broken"):
        self.name = name
        self.calls = []

    def set(self, identifier, username, secret):
        self.calls.append("set")
        raise KeyringLocked("locked")

    def get(self, identifier):
        self.calls.append("get")
        raise KeyringLocked("locked")

    def clear(self, identifier):
        self.calls.append("clear")
        raise KeyringLocked("locked")


@pytest.fixture
def kv(tmp_path):
    return JsonKeyValueStore(tmp_path / "wallet-metadata.json")


@pytest.fixture
def metadata(kv):
    return MetadataStore(kv)


@pytest.fixture
def primary_keyring():
    return MemoryKeyring()


@pytest.fixture
def secondary_keyring():
    return MemoryKeyring()


@pytest.fixture
def tiers(kv, primary_keyring, secondary_keyring):
    return [
        KeyringInternetTier(backend=primary_keyring),
        KeyringGenericTier(service_name="pocket-test", backend=secondary_keyring),
        PlainStoreTier(kv),
    ]


@pytest.fixture
def credentials(tiers):
    return CredentialStore(tiers)


@pytest.fixture
def manager(credentials, metadata):
    return WalletManager(credentials, metadata)
