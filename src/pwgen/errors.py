"""Exception hierarchy for pwgen.

Core operations raise these; only the CLI turns them into messages and exit
codes.
"""

from __future__ import annotations


class PwgenError(Exception):
    """Base class for every error raised by the pwgen core."""


class NotFoundError(PwgenError):
    """The vault file does not exist."""


class RecordNotFoundError(NotFoundError):
    """No record matches the query."""


class AlreadyExistsError(PwgenError):
    """A vault file already exists at the target path."""


class DuplicateEntryError(AlreadyExistsError):
    """A record with the same service and login is already stored."""


class WrongPassphraseError(PwgenError):
    """Decryption failed: wrong master passphrase or corrupted file."""


class CorruptStorageError(PwgenError):
    """The vault decrypted but its contents are not a valid vault."""


class InvalidSelectionError(PwgenError):
    """A 1-based selection index is outside the candidate list."""


class StorageIOError(PwgenError):
    """The vault file could not be read or written."""


class PlatformUnsupportedError(PwgenError):
    """No per-user config directory is known for this platform."""


class ConfirmationRequiredError(PwgenError):
    """A destructive operation was requested without confirmation."""


class InvalidEntryError(PwgenError):
    """A service, login or password was empty."""
