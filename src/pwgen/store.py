"""Encrypted vault file I/O.

The file is a single envelope (see :mod:`pwgen.crypto`) wrapping the
JSON-encoded :class:`~pwgen.models.Vault`. Every save re-encrypts the whole
vault under a fresh salt and IV and replaces the previous file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .crypto import CbcEnvelope, EnvelopeCipher
from .errors import (
    AlreadyExistsError,
    CorruptStorageError,
    NotFoundError,
    StorageIOError,
)
from .models import Vault

logger = logging.getLogger(__name__)


class VaultStore:
    """Manages reading and writing the encrypted vault file."""

    def __init__(self, path: Path, cipher: Optional[EnvelopeCipher] = None) -> None:
        self.path = path
        self.cipher = cipher or CbcEnvelope()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        return self.path.exists()

    def init(self, passphrase: str, *, overwrite: bool = False) -> Vault:
        """Create a new, empty vault protected by *passphrase*.

        Refuses to replace an existing file unless *overwrite* is set.
        """
        if self.exists() and not overwrite:
            raise AlreadyExistsError(f"Password storage already exists at {self.path}.")
        vault = Vault()
        self._write(vault, passphrase)
        logger.info("Initialised empty vault at %s", self.path)
        return vault

    def load(self, passphrase: str) -> Vault:
        """Read and decrypt the vault; returns a :class:`Vault` instance."""
        if not self.exists():
            raise NotFoundError(
                f"Password storage not found at {self.path}. Initialise it with 'pwgen init'."
            )
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageIOError(f"Cannot read storage file: {exc}") from exc

        plaintext = self.cipher.decrypt(raw, passphrase)
        try:
            vault = Vault.from_bytes(plaintext)
        except (UnicodeDecodeError, ValidationError) as exc:
            raise CorruptStorageError("Invalid master password or corrupted storage file.") from exc

        logger.debug("Loaded %d entries from %s", len(vault.entries), self.path)
        return vault

    def save(self, vault: Vault, passphrase: str) -> None:
        """Encrypt and persist *vault* to disk."""
        self._write(vault, passphrase)
        logger.debug("Saved %d entries to %s", len(vault.entries), self.path)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, vault: Vault, passphrase: str) -> None:
        data = self.cipher.encrypt(vault.to_bytes(), passphrase)

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Atomic write via temp file
            tmp.write_bytes(data)
            tmp.replace(self.path)

            # Restrict permissions: owner read/write only
            if os.name == "posix":
                os.chmod(self.path, 0o600)
        except OSError as exc:
            if tmp.exists():
                tmp.unlink()
            raise StorageIOError(f"Cannot write storage file: {exc}") from exc


def initialize_vault(path: Path, passphrase: str, overwrite: bool = False) -> None:
    VaultStore(path).init(passphrase, overwrite=overwrite)
