from .options import (
    DEFAULT_CLIENT_ID,
    ORGANIZATIONS_TENANT_ID,
    CredentialConfigurationOptions,
    StoreLocation,
    StoreName,
    VanityUrlOptions,
    X509CertificateOptions,
)
from .settings import Settings, get_settings

__all__ = [
    "DEFAULT_CLIENT_ID",
    "ORGANIZATIONS_TENANT_ID",
    "CredentialConfigurationOptions",
    "Settings",
    "StoreLocation",
    "StoreName",
    "VanityUrlOptions",
    "X509CertificateOptions",
    "get_settings",
]
