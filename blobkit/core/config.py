"""Configuration (settings and environment).

Single source of truth for blobkit configuration. Uses pydantic-settings
with .env support. Backend-specific requirements are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_BACKENDS = ("azure", "local")


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    Azure fields map to AZURE_STORAGE_* environment variables; the local
    backend only needs STORAGE_ROOT.
    """

    app_name: str = "blobkit"
    debug: bool = False

    # Backend: "azure" (Blob Storage) or "local" (filesystem, dev/tests)
    storage_backend: str = "local"

    # Azure Blob Storage
    azure_storage_connection_string: SecretStr = SecretStr("")
    azure_storage_account_name: str = ""
    azure_storage_account_key: SecretStr = SecretStr("")
    azure_storage_sas_ttl_hours: int = 1  # 0 = links expire immediately
    azure_storage_domain: str = "blob.core.windows.net"

    # Local filesystem backend
    storage_root: str = "/var/blobkit/storage"
    storage_base_url: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Validate TTL and backend-specific requirements.

        - TTL must be a non-negative number of hours.
        - azure: connection string, account name and account key required
          (the key signs access URLs locally).
        - local: storage_root required.
        """
        if self.azure_storage_sas_ttl_hours < 0:
            raise ValueError(
                "AZURE_STORAGE_SAS_TTL_HOURS must be >= 0, "
                f"got: {self.azure_storage_sas_ttl_hours}"
            )
        backend = self.storage_backend.lower()
        if backend == "azure":
            if not self.azure_storage_connection_string.get_secret_value():
                raise ValueError(
                    "AZURE_STORAGE_CONNECTION_STRING is required when "
                    "storage_backend is 'azure'."
                )
            if (
                not self.azure_storage_account_name
                or not self.azure_storage_account_key.get_secret_value()
            ):
                raise ValueError(
                    "AZURE_STORAGE_ACCOUNT_NAME and AZURE_STORAGE_ACCOUNT_KEY are "
                    "required when storage_backend is 'azure' (used to sign URLs)."
                )
        elif backend == "local":
            if not self.storage_root:
                raise ValueError("STORAGE_ROOT is required for the local backend")
        else:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(repr(b) for b in SUPPORTED_BACKENDS)}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
