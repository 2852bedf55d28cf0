"""
Configuration management for the SDK using Pydantic Settings.
Implements singleton pattern to ensure single instance throughout the application.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spo_admin.config.options import (
    DEFAULT_CLIENT_ID,
    ORGANIZATIONS_TENANT_ID,
    CredentialConfigurationOptions,
    StoreLocation,
    StoreName,
    VanityUrlOptions,
    X509CertificateOptions,
)


class Settings(BaseSettings):
    """
    SDK settings loaded from environment variables.
    Uses Pydantic Settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Entra ID / Azure AD settings
    client_id: str = Field(
        default=DEFAULT_CLIENT_ID,
        description="Application (client) ID from Azure App Registration",
    )
    tenant_id: str = Field(
        default=ORGANIZATIONS_TENANT_ID,
        description="Azure AD Tenant ID (GUID or domain name), or 'organizations'",
    )
    authority_host: str = Field(
        default="https://login.microsoftonline.com",
        description="Entra ID login host used to build the authority URL",
    )

    # Certificate store settings
    certificate_store_path: Path = Field(
        default=Path.home() / ".spo_admin" / "certstore",
        description="Root directory of the file based certificate store",
    )
    certificate_store_name: StoreName = Field(
        default=StoreName.MY,
        description="Certificate store name (My, Root, TrustedPeople, ...)",
    )
    certificate_store_location: StoreLocation = Field(
        default=StoreLocation.CURRENT_USER,
        description="Certificate store location (CurrentUser or LocalMachine)",
    )
    certificate_thumbprint: Optional[str] = Field(
        default=None,
        description="SHA-1 thumbprint of the certificate used as client credential",
    )
    certificate_password: Optional[str] = Field(
        default=None,
        description="Password protecting PKCS#12 files or encrypted private keys",
    )

    # SharePoint / Graph endpoints
    site_url: Optional[str] = Field(
        default=None,
        description="Any site URL of the tenant, e.g. https://contoso.sharepoint.com",
    )
    admin_url: Optional[str] = Field(
        default=None,
        description="Tenant admin center URL for tenants using vanity domains",
    )
    graph_base_url: str = Field(
        default="https://graph.microsoft.com/v1.0",
        description="Microsoft Graph base URL",
    )

    http_timeout: float = Field(default=100.0, description="HTTP timeout in seconds")
    log_level: str = Field(default="INFO", description="Log level used by the command line")

    @field_validator("client_id", "tenant_id")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Validate identifiers are not empty."""
        if not v or v.strip() == "":
            raise ValueError("client_id and tenant_id must not be empty")
        return v.strip()

    @field_validator("certificate_thumbprint")
    @classmethod
    def validate_thumbprint(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank thumbprint as not configured."""
        if v is None or v.strip() == "":
            return None
        return v.strip()

    @field_validator("certificate_store_path")
    @classmethod
    def expand_store_path(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @field_validator("authority_host", "graph_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def authority(self) -> str:
        """Get the authority URL for the configured tenant."""
        return f"{self.authority_host}/{self.tenant_id}"

    @property
    def credential_options(self) -> CredentialConfigurationOptions:
        """Build the credential options consumed by the certificate provider."""
        return CredentialConfigurationOptions(
            client_id=self.client_id,
            tenant_id=self.tenant_id,
            x509_certificate=X509CertificateOptions(
                store_name=self.certificate_store_name,
                store_location=self.certificate_store_location,
                thumbprint=self.certificate_thumbprint,
            ),
        )

    @property
    def vanity_url_options(self) -> Optional[VanityUrlOptions]:
        """Get the configured vanity URL override, if any."""
        if self.admin_url:
            return VanityUrlOptions(admin_uri=self.admin_url)
        return None


@lru_cache()
def get_settings() -> Settings:
    """
    Get SDK settings instance (singleton pattern using lru_cache).

    Returns:
        Settings: The settings instance
    """
    return Settings()
