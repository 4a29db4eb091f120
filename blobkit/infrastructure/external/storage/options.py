"""Immutable storage options held by StorageService for its lifetime."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blobkit.core.config import Settings

DEFAULT_STORAGE_DOMAIN = "blob.core.windows.net"


@dataclass(frozen=True)
class StorageOptions:
    """Connection credential, signing key, account name and SAS lifetime.

    Secrets are excluded from repr so options can be logged safely.
    """

    connection_string: str = field(repr=False)
    account_key: str = field(repr=False)
    account_name: str
    sas_ttl_hours: int = 1
    storage_domain: str = DEFAULT_STORAGE_DOMAIN

    def __post_init__(self) -> None:
        if self.sas_ttl_hours < 0:
            raise ValueError(f"sas_ttl_hours must be >= 0, got: {self.sas_ttl_hours}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "StorageOptions":
        """Build options from Settings, unwrapping secret values."""
        return cls(
            connection_string=settings.azure_storage_connection_string.get_secret_value(),
            account_key=settings.azure_storage_account_key.get_secret_value(),
            account_name=settings.azure_storage_account_name,
            sas_ttl_hours=settings.azure_storage_sas_ttl_hours,
            storage_domain=settings.azure_storage_domain,
        )
