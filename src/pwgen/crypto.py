"""Cryptographic primitives for pwgen.

Key derivation: PBKDF2-HMAC-SHA256 (10 000 iterations, 16-byte salt).
Encryption:     AES-256-CBC with PKCS7 padding.

Envelope layout
---------------
Offset  Length  Content
0       16      Salt
16      16      IV
32      N       Ciphertext (N is a multiple of 16)

The envelope carries no MAC. A wrong passphrase is detected only through a
padding failure, so callers must also treat an unparseable plaintext as a
wrong passphrase or a damaged file.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import WrongPassphraseError

logger = logging.getLogger(__name__)

SALT_SIZE = 16
IV_SIZE = 16
KEY_SIZE = 32
BLOCK_SIZE = 16
PBKDF2_ITERATIONS = 10_000
HEADER_SIZE = SALT_SIZE + IV_SIZE


def generate_salt() -> bytes:
    """Return a cryptographically-random 16-byte salt."""
    return os.urandom(SALT_SIZE)


def generate_iv() -> bytes:
    """Return a cryptographically-random 16-byte IV."""
    return os.urandom(IV_SIZE)


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """Derive a 32-byte AES-256 key from *passphrase* and *salt*."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(passphrase.encode("utf-8"))


def encrypt(plaintext: bytes, passphrase: str) -> bytes:
    """Encrypt *plaintext* and return ``salt || iv || ciphertext``.

    A fresh salt and IV are drawn on every call, so encrypting the same
    plaintext twice never yields the same envelope.
    """
    salt = generate_salt()
    iv = generate_iv()
    key = derive_key(passphrase, salt)

    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return salt + iv + ciphertext


def decrypt(blob: bytes, passphrase: str) -> bytes:
    """Decrypt an envelope produced by :func:`encrypt`.

    Raises :class:`WrongPassphraseError` when the envelope is malformed or
    the padding does not check out.
    """
    if len(blob) < HEADER_SIZE:
        raise WrongPassphraseError("Storage file is truncated or not a pwgen vault.")

    salt = blob[:SALT_SIZE]
    iv = blob[SALT_SIZE:HEADER_SIZE]
    ciphertext = blob[HEADER_SIZE:]

    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise WrongPassphraseError("Invalid master password or corrupted storage file.")

    key = derive_key(passphrase, salt)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        logger.debug("PKCS7 unpadding failed for %d-byte ciphertext", len(ciphertext))
        raise WrongPassphraseError("Invalid master password or corrupted storage file.") from exc


class EnvelopeCipher(Protocol):
    """Anything that can seal and open a vault payload with a passphrase."""

    def encrypt(self, plaintext: bytes, passphrase: str) -> bytes: ...

    def decrypt(self, blob: bytes, passphrase: str) -> bytes: ...


class CbcEnvelope:
    """The AES-256-CBC envelope used by every existing storage file."""

    def encrypt(self, plaintext: bytes, passphrase: str) -> bytes:
        return encrypt(plaintext, passphrase)

    def decrypt(self, blob: bytes, passphrase: str) -> bytes:
        return decrypt(blob, passphrase)
