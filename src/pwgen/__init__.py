"""pwgen — a local, passphrase-protected password vault and generator."""

__version__ = "0.1.0"

from .generator import generate_password
from .records import (
    add_record,
    delete_record,
    find_records,
    list_records,
    select_by_index,
    update_password,
)
from .store import VaultStore, initialize_vault

__all__ = [
    "VaultStore",
    "add_record",
    "delete_record",
    "find_records",
    "generate_password",
    "initialize_vault",
    "list_records",
    "select_by_index",
    "update_password",
]
