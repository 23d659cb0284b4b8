"""CRUD operations over an unlocked :class:`~pwgen.models.Vault`.

All service/login comparisons are case-insensitive and ordinal. None of these
functions touch the disk or prompt; the caller saves the vault afterwards and
handles disambiguation when a query matches more than one entry.
"""

from __future__ import annotations

import logging
from typing import Optional

from .errors import (
    ConfirmationRequiredError,
    DuplicateEntryError,
    InvalidEntryError,
    InvalidSelectionError,
    RecordNotFoundError,
)
from .models import PasswordEntry, Vault

logger = logging.getLogger(__name__)


def exists(vault: Vault, service: str, login: str) -> bool:
    return any(e.matches(service, login) for e in vault.entries)


def ensure_unique(vault: Vault, service: str, login: str) -> None:
    """Raise :class:`DuplicateEntryError` if *service*/*login* is taken."""
    if exists(vault, service, login):
        raise DuplicateEntryError(
            f"Password for {service} with login {login} already exists. "
            "Use 'update' command to change it."
        )


def _require(**fields: Optional[str]) -> None:
    for name, value in fields.items():
        if not value:
            raise InvalidEntryError(f"{name.capitalize()} cannot be empty.")


def add_record(
    vault: Vault,
    service: str,
    login: str,
    password: str,
    url: Optional[str] = "",
    note: Optional[str] = "",
) -> PasswordEntry:
    """Append a new entry.

    Raises :class:`InvalidEntryError` if service, login or password is empty,
    and :class:`DuplicateEntryError` on a service/login clash.
    """
    _require(service=service, login=login, password=password)
    ensure_unique(vault, service, login)
    entry = PasswordEntry(service=service, login=login, password=password, url=url, note=note)
    vault.entries.append(entry)
    logger.debug("Added entry for service %r", service)
    return entry


def list_records(vault: Vault) -> list[PasswordEntry]:
    return list(vault.entries)


def find_records(
    vault: Vault,
    service_query: str,
    exact: bool = False,
    login: Optional[str] = None,
) -> list[PasswordEntry]:
    """Return entries whose service matches *service_query*, in vault order.

    With ``exact=False`` the query is a substring of the service name; with
    ``exact=True`` it must equal it. Passing *login* additionally requires an
    exact login match and implies ``exact=True``.
    """
    q = service_query.lower()
    if login is not None:
        return [e for e in vault.entries if e.matches(service_query, login)]
    if exact:
        return [e for e in vault.entries if e.service.lower() == q]
    return [e for e in vault.entries if q in e.service.lower()]


def resolve(candidates: list[PasswordEntry], query: str = "") -> Optional[PasswordEntry]:
    """Return the sole candidate, or ``None`` if the caller must choose.

    Raises :class:`RecordNotFoundError` when there are no candidates.
    """
    if not candidates:
        raise RecordNotFoundError(f"No passwords found for service: {query}")
    if len(candidates) == 1:
        return candidates[0]
    return None


def select_by_index(candidates: list[PasswordEntry], index: int) -> PasswordEntry:
    """Pick a candidate by its 1-based *index*."""
    if not 1 <= index <= len(candidates):
        raise InvalidSelectionError(
            f"Invalid selection {index}: choose a number between 1 and {len(candidates)}."
        )
    return candidates[index - 1]


def _position(vault: Vault, entry: PasswordEntry) -> int:
    # by identity: an equal-valued copy is not the stored entry
    for i, candidate in enumerate(vault.entries):
        if candidate is entry:
            return i
    raise RecordNotFoundError(
        f"No stored entry for service {entry.service} with login {entry.login}."
    )


def update_password(vault: Vault, entry: PasswordEntry, new_password: str) -> PasswordEntry:
    """Replace only the password of *entry*; every other field is kept."""
    _require(password=new_password)
    _position(vault, entry)
    entry.password = new_password
    logger.debug("Updated password for service %r", entry.service)
    return entry


def delete_record(vault: Vault, entry: PasswordEntry, confirmed: bool = False) -> None:
    """Remove *entry* from the vault once the caller has *confirmed*."""
    if not confirmed:
        raise ConfirmationRequiredError(
            f"Deleting {entry.service} with login {entry.login} requires confirmation."
        )
    del vault.entries[_position(vault, entry)]
    logger.debug("Deleted entry for service %r", entry.service)
