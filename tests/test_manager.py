import threading

import pytest
from eth_account import Account

from conftest import FailingTier
from errors import (
    InconsistentState,
    InvalidPrivateKeyFormat,
    InvalidSeedPhrase,
    InvalidSeedPhraseLength,
    StorageUnavailable,
    WalletAlreadyExists,
    WalletNotFound,
)
from storage import (
    ADDRESS_KEY,
    BALANCE_KEY,
    FALLBACK_SECRET_KEY,
    CredentialStore,
    CredentialTier,
    KeyringInternetTier,
    KeyValueStoreError,
    PlainStoreTier,
)
from wallet import ImportMethod, WalletManager, WalletState

VALID_KEY = "0x" + "11" * 32
ABANDON_PHRASE = " ".join(["abandon"] * 11 + ["about"])


class WriteOnlyTier(CredentialTier):
    """Accepts writes but never returns them."""

    name = "write-only"

    def set(self, identifier, username, secret):
        pass

    def get(self, identifier):
        return None

    def clear(self, identifier):
        pass


def test_fresh_install_loads_absent(manager):
    assert manager.load() is WalletState.ABSENT
    assert manager.address is None
    assert not manager.has_wallet


def test_create_then_export_round_trip(manager, metadata):
    identity = manager.create()

    assert manager.state is WalletState.PRESENT
    assert manager.address == identity.address
    assert metadata.address == identity.address
    assert identity.mnemonic is not None
    assert manager.export_private_key() == identity.private_key


def test_state_survives_restart(manager, credentials, metadata):
    identity = manager.create()

    restarted = WalletManager(credentials, metadata)
    assert restarted.load() is WalletState.PRESENT
    assert restarted.address == identity.address
    assert restarted.display_address == identity.display_address


def test_import_private_key(manager):
    identity = manager.import_wallet(ImportMethod.PRIVATE_KEY, VALID_KEY)

    assert identity.address == Account.from_key(VALID_KEY).address
    assert identity.mnemonic is None
    assert manager.export_private_key() == VALID_KEY


def test_import_seed_phrase(manager):
    identity = manager.import_wallet("seedPhrase", ABANDON_PHRASE)

    assert manager.export_private_key() == identity.private_key
    assert manager.address == identity.address


@pytest.mark.parametrize(
    "method, text, error",
    [
        (ImportMethod.PRIVATE_KEY, "0x1234", InvalidPrivateKeyFormat),
        (ImportMethod.SEED_PHRASE, " ".join(["abandon"] * 13), InvalidSeedPhraseLength),
        (ImportMethod.SEED_PHRASE, " ".join(["abandon"] * 11 + ["notaword"]), InvalidSeedPhrase),
    ],
)
def test_invalid_import_stores_nothing(manager, metadata, credentials, method, text, error):
    with pytest.raises(error):
        manager.import_wallet(method, text)

    assert manager.state is WalletState.ABSENT
    assert metadata.address is None
    assert credentials.get_secret() is None


def test_second_wallet_is_refused(manager):
    first = manager.create()

    with pytest.raises(WalletAlreadyExists):
        manager.import_wallet(ImportMethod.PRIVATE_KEY, VALID_KEY)

    assert manager.address == first.address
    assert manager.export_private_key() == first.private_key


def test_concurrent_creates_store_exactly_one_wallet(manager, credentials, metadata):
    barrier = threading.Barrier(2)
    results, errors = [], []

    def worker():
        barrier.wait()
        try:
            results.append(manager.create())
        except WalletAlreadyExists as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1
    assert len(errors) == 1
    winner = results[0]
    assert metadata.address == winner.address
    stored = credentials.get_secret()
    assert (stored.username, stored.secret) == (winner.address, winner.private_key)


def test_credential_failure_rolls_back_address(metadata):
    manager = WalletManager(
        CredentialStore([FailingTier("a"), FailingTier("b"), FailingTier("c")]),
        metadata,
    )

    with pytest.raises(StorageUnavailable):
        manager.create()

    assert metadata.address is None
    assert manager.state is WalletState.ABSENT
    assert manager.load() is WalletState.ABSENT


def test_unverifiable_write_rolls_back_address(metadata):
    manager = WalletManager(CredentialStore([WriteOnlyTier()]), metadata)

    with pytest.raises(StorageUnavailable):
        manager.import_wallet(ImportMethod.PRIVATE_KEY, VALID_KEY)

    assert metadata.address is None
    assert manager.state is WalletState.ABSENT


def test_metadata_write_failure_never_touches_secret(manager, kv, credentials, monkeypatch):
    def refuse(data):
        raise KeyValueStoreError("disk full")

    monkeypatch.setattr(kv, "_save", refuse)

    with pytest.raises(StorageUnavailable):
        manager.create()

    assert credentials.get_secret() is None


def test_remove_clears_every_tier(manager, metadata, primary_keyring, secondary_keyring, kv, tiers):
    manager.create()
    manager.cache_set(BALANCE_KEY, {"ETH": "0.1"})
    # Plant copies in the weaker tiers as left behind by an earlier fallback
    tiers[1].set("walletPrivateKey", manager.address, "0x" + "22" * 32)
    tiers[2].set("walletPrivateKey", manager.address, "0x" + "22" * 32)

    manager.remove()

    assert metadata.address is None
    assert metadata.get(BALANCE_KEY) is None
    assert primary_keyring.entries == {}
    assert secondary_keyring.entries == {}
    assert FALLBACK_SECRET_KEY not in kv
    assert all(tier.get("walletPrivateKey") is None for tier in tiers)
    assert manager.load() is WalletState.ABSENT


def test_remove_tolerates_secret_tier_failure(manager, metadata, tiers, secondary_keyring, monkeypatch):
    manager.create()
    tiers[1].set("walletPrivateKey", manager.address, "0x" + "22" * 32)

    def locked(identifier):
        raise RuntimeError("keychain locked")

    monkeypatch.setattr(tiers[0], "clear", locked)

    manager.remove()

    assert metadata.address is None
    assert secondary_keyring.entries == {}
    assert manager.state is WalletState.ABSENT


def test_remove_fails_when_address_survives(manager, kv, primary_keyring, monkeypatch):
    manager.create()

    def refuse(data):
        raise KeyValueStoreError("read-only filesystem")

    monkeypatch.setattr(kv, "_save", refuse)

    with pytest.raises(StorageUnavailable):
        manager.remove()

    # The secure tiers were still cleared
    assert primary_keyring.entries == {}


def test_address_without_secret_is_inconsistent(manager, metadata):
    metadata.set(ADDRESS_KEY, Account.from_key(VALID_KEY).address)

    with pytest.raises(InconsistentState):
        manager.load()
    assert manager.state is WalletState.ABSENT

    with pytest.raises(InconsistentState):
        manager.export_private_key()


def test_inconsistent_wallet_can_be_reimported(manager, metadata):
    metadata.set(ADDRESS_KEY, "0x0000000000000000000000000000000000000001")

    identity = manager.import_wallet(ImportMethod.PRIVATE_KEY, VALID_KEY)

    assert metadata.address == identity.address
    assert manager.load() is WalletState.PRESENT


def test_secret_for_other_address_is_inconsistent(manager, metadata, credentials):
    manager.import_wallet(ImportMethod.PRIVATE_KEY, VALID_KEY)
    metadata.set(ADDRESS_KEY, "0x0000000000000000000000000000000000000001")

    with pytest.raises(InconsistentState):
        manager.load()


def test_orphaned_secret_without_address_loads_absent(manager, credentials):
    credentials.set_secret("0xabc", VALID_KEY)

    assert manager.load() is WalletState.ABSENT


def test_create_clears_orphaned_secret_first(metadata, kv):
    plain = PlainStoreTier(kv)
    plain.set("walletPrivateKey", "0xstale", "0x" + "33" * 32)
    manager = WalletManager(CredentialStore([plain]), metadata)

    identity = manager.create()

    assert manager.export_private_key() == identity.private_key


def test_export_without_wallet(manager):
    with pytest.raises(WalletNotFound):
        manager.export_private_key()


def test_cache_helpers(manager):
    manager.cache_set(BALANCE_KEY, "1.25")
    assert manager.cache_get(BALANCE_KEY) == "1.25"

    with pytest.raises(KeyError):
        manager.cache_set(ADDRESS_KEY, "0xabc")
    with pytest.raises(KeyError):
        manager.cache_get(FALLBACK_SECRET_KEY)


def test_reset_storage_wipes_non_wallet_keys(manager, kv, primary_keyring):
    manager.create()
    kv.set("onboardingSeen", True)

    cleared = manager.reset_storage()

    assert "onboardingSeen" in cleared
    assert ADDRESS_KEY in cleared
    assert kv.keys() == []
    assert primary_keyring.entries == {}
    assert manager.state is WalletState.ABSENT


def test_lifecycle_leaves_no_secret_in_any_tier(manager, credentials, tiers, primary_keyring):
    identity = manager.create()

    assert credentials.last_tier == "keyring-internet"
    assert manager.export_private_key() == identity.private_key

    manager.remove()

    assert credentials.get_secret() is None
    assert all(tier.get("walletPrivateKey") is None for tier in tiers)
    assert primary_keyring.entries == {}


def test_rollback_clears_primary_keyring_entry(metadata, primary_keyring, monkeypatch):
    tier = KeyringInternetTier(backend=primary_keyring)
    monkeypatch.setattr(tier, "get", lambda identifier: None)
    manager = WalletManager(CredentialStore([tier]), metadata)

    with pytest.raises(StorageUnavailable):
        manager.create()

    assert primary_keyring.entries == {}
    assert metadata.address is None
