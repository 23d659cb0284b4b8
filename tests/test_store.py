"""Tests for pwgen.store."""

import os

import pytest

from pwgen.crypto import encrypt
from pwgen.errors import (
    AlreadyExistsError,
    CorruptStorageError,
    NotFoundError,
    StorageIOError,
    WrongPassphraseError,
)
from pwgen.models import PasswordEntry, Vault
from pwgen.records import add_record
from pwgen.store import VaultStore, initialize_vault


def _store(tmp_path, name="storage.cpwgen") -> VaultStore:
    return VaultStore(tmp_path / name)


# ---------------------------------------------------------------------------
# Init / exists
# ---------------------------------------------------------------------------


def test_new_store_does_not_exist(tmp_path):
    assert not _store(tmp_path).exists()


def test_init_creates_file(tmp_path):
    store = _store(tmp_path)
    store.init("password")
    assert store.exists()


def test_init_creates_missing_parent_dirs(tmp_path):
    store = VaultStore(tmp_path / "pwgen" / "nested" / "storage.cpwgen")
    store.init("password")
    assert store.exists()


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
def test_init_sets_restricted_permissions(tmp_path):
    store = _store(tmp_path)
    store.init("password")
    assert store.path.stat().st_mode & 0o777 == 0o600


def test_init_refuses_existing_file(tmp_path):
    store = _store(tmp_path)
    store.init("pw1")
    before = store.path.read_bytes()
    with pytest.raises(AlreadyExistsError):
        store.init("pw2")
    assert store.path.read_bytes() == before


def test_init_overwrite_replaces_vault(tmp_path):
    store = _store(tmp_path)
    store.init("pw1")
    vault = store.load("pw1")
    add_record(vault, "aws", "alice", "x")
    store.save(vault, "pw1")

    store.init("pw2", overwrite=True)
    assert store.load("pw2").entries == []


def test_initialize_vault_function(tmp_path):
    path = tmp_path / "storage.cpwgen"
    initialize_vault(path, "pw")
    assert VaultStore(path).load("pw").entries == []
    with pytest.raises(AlreadyExistsError):
        initialize_vault(path, "pw")
    initialize_vault(path, "pw", overwrite=True)


# ---------------------------------------------------------------------------
# Round-trip load/save
# ---------------------------------------------------------------------------


def test_load_empty_vault(tmp_path):
    store = _store(tmp_path)
    store.init("pw")
    vault = store.load("pw")
    assert isinstance(vault, Vault)
    assert vault.entries == []


def test_correct_horse_scenario(tmp_path):
    store = _store(tmp_path)
    store.init("correct-horse")
    vault = store.load("correct-horse")
    add_record(vault, "aws", "alice", "x")
    store.save(vault, "correct-horse")

    reloaded = store.load("correct-horse")
    assert len(reloaded.entries) == 1
    assert reloaded.entries[0].service == "aws"
    assert reloaded.entries[0].password == "x"

    with pytest.raises(WrongPassphraseError):
        store.load("wrong-pass")


def test_all_fields_persist(tmp_path):
    store = _store(tmp_path)
    store.init("pw")
    vault = store.load("pw")
    vault.entries.append(
        PasswordEntry(
            service="github",
            login="alice@example.com",
            password="s3cret",
            url="https://github.com",
            note="2fa on phone",
        )
    )
    store.save(vault, "pw")

    loaded = store.load("pw").entries[0]
    assert loaded.login == "alice@example.com"
    assert loaded.password == "s3cret"
    assert loaded.url == "https://github.com"
    assert loaded.note == "2fa on phone"


def test_every_save_rewrites_with_fresh_envelope(tmp_path):
    store = _store(tmp_path)
    store.init("pw")
    vault = store.load("pw")
    store.save(vault, "pw")
    first = store.path.read_bytes()
    store.save(vault, "pw")
    second = store.path.read_bytes()
    assert first[:32] != second[:32]


def test_save_leaves_no_temp_file(tmp_path):
    store = _store(tmp_path)
    store.init("pw")
    assert [p.name for p in tmp_path.iterdir()] == ["storage.cpwgen"]


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


def test_load_missing_file_raises_not_found(tmp_path):
    with pytest.raises(NotFoundError):
        _store(tmp_path).load("pw")


def test_truncated_file_raises_wrong_passphrase(tmp_path):
    path = tmp_path / "trunc.cpwgen"
    path.write_bytes(b"\x00" * 20)
    with pytest.raises(WrongPassphraseError):
        VaultStore(path).load("pw")


def test_valid_envelope_with_bad_json_raises_corrupt(tmp_path):
    path = tmp_path / "bad.cpwgen"
    path.write_bytes(encrypt(b"[1, 2, 3]", "pw"))
    with pytest.raises(CorruptStorageError):
        VaultStore(path).load("pw")


def test_valid_envelope_with_non_utf8_raises_corrupt(tmp_path):
    path = tmp_path / "bad.cpwgen"
    path.write_bytes(encrypt(b"\xff\xfe\xfa", "pw"))
    with pytest.raises(CorruptStorageError):
        VaultStore(path).load("pw")


def test_reads_file_written_by_original_tool(tmp_path):
    path = tmp_path / "storage.cpwgen"
    payload = b'{"Entries":[{"Service":"aws","Login":"alice","Password":"x","Url":"","Note":""}]}'
    path.write_bytes(encrypt(payload, "pw"))
    assert VaultStore(path).load("pw").entries[0].login == "alice"


def test_reads_legacy_entry_with_empty_password(tmp_path):
    path = tmp_path / "storage.cpwgen"
    payload = (
        b'{"Entries":['
        b'{"Service":"aws","Login":"alice","Password":"real","Url":"","Note":""},'
        b'{"Service":"gcp","Login":"bob","Password":"","Url":"","Note":""}'
        b"]}"
    )
    path.write_bytes(encrypt(payload, "pw"))

    entries = VaultStore(path).load("pw").entries
    assert [(e.service, e.password) for e in entries] == [("aws", "real"), ("gcp", "")]


def test_corrupt_message_mentions_wrong_password(tmp_path):
    path = tmp_path / "bad.cpwgen"
    path.write_bytes(encrypt(b"not json", "pw"))
    with pytest.raises(CorruptStorageError, match="Invalid master password"):
        VaultStore(path).load("pw")


def test_unreadable_path_raises_io_error(tmp_path):
    # a directory where the file should be
    path = tmp_path / "storage.cpwgen"
    path.mkdir()
    with pytest.raises(StorageIOError):
        VaultStore(path).load("pw")


def test_unwritable_target_raises_io_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    store = VaultStore(blocker / "storage.cpwgen")
    with pytest.raises(StorageIOError):
        store.init("pw")


class _RecordingCipher:
    def __init__(self):
        self.calls = []

    def encrypt(self, plaintext, passphrase):
        self.calls.append("encrypt")
        return plaintext[::-1]

    def decrypt(self, blob, passphrase):
        self.calls.append("decrypt")
        return blob[::-1]


def test_store_accepts_alternative_cipher(tmp_path):
    cipher = _RecordingCipher()
    store = VaultStore(tmp_path / "storage.cpwgen", cipher=cipher)
    store.init("pw")
    assert store.load("pw").entries == []
    assert cipher.calls == ["encrypt", "decrypt"]
