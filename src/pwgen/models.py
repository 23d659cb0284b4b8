"""Domain models for pwgen."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal

# Stored JSON uses PascalCase keys ("Service", "Entries", ...).
_STORAGE_CONFIG = ConfigDict(
    alias_generator=to_pascal,
    populate_by_name=True,
    extra="ignore",
)


class PasswordEntry(BaseModel):
    """A single stored credential."""

    model_config = _STORAGE_CONFIG

    # may be empty when loaded; records.add_record enforces non-empty values
    service: str
    login: str
    password: str
    url: str = ""
    note: str = ""

    @field_validator("url", "note", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    def matches(self, service: str, login: str) -> bool:
        """True if *service* and *login* equal this entry's, ignoring case."""
        return (
            self.service.lower() == service.lower()
            and self.login.lower() == login.lower()
        )


class Vault(BaseModel):
    """Ordered collection of entries, kept in insertion order."""

    model_config = _STORAGE_CONFIG

    entries: list[PasswordEntry] = Field(default_factory=list)

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Vault":
        # utf-8-sig drops a BOM written by other tools
        return cls.model_validate_json(data.decode("utf-8-sig"))
