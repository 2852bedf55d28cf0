"""
Immutable option values used to configure authentication and admin requests.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Well-known client id registered for interactive and app-only SharePoint access
DEFAULT_CLIENT_ID = "31359c7f-bd7e-475c-86db-fdb8c937548e"

# Tenant sentinel selecting the multi-tenant "organizations" authority
ORGANIZATIONS_TENANT_ID = "organizations"


class StoreLocation(str, Enum):
    """Location of a certificate store."""

    CURRENT_USER = "CurrentUser"
    LOCAL_MACHINE = "LocalMachine"


class StoreName(str, Enum):
    """Name of a certificate store within a store location."""

    ADDRESS_BOOK = "AddressBook"
    AUTH_ROOT = "AuthRoot"
    CERTIFICATE_AUTHORITY = "CertificateAuthority"
    DISALLOWED = "Disallowed"
    MY = "My"
    ROOT = "Root"
    TRUSTED_PEOPLE = "TrustedPeople"
    TRUSTED_PUBLISHER = "TrustedPublisher"


class X509CertificateOptions(BaseModel):
    """Reference to a certificate in a certificate store."""

    model_config = ConfigDict(frozen=True)

    store_name: StoreName = Field(default=StoreName.MY, description="Certificate store name")
    store_location: StoreLocation = Field(
        default=StoreLocation.CURRENT_USER,
        description="Certificate store location",
    )
    thumbprint: Optional[str] = Field(None, description="SHA-1 thumbprint of the certificate")


class CredentialConfigurationOptions(BaseModel):
    """Credentials for the X.509 certificate authentication provider."""

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = Field(None, description="Application (client) ID")
    tenant_id: Optional[str] = Field(None, description="Tenant ID, or 'organizations'")
    x509_certificate: Optional[X509CertificateOptions] = Field(
        None,
        description="Certificate used as the client credential",
    )


class VanityUrlOptions(BaseModel):
    """
    Custom domains used by a tenant.

    When set, ``admin_uri`` replaces the ``{tenant}-admin.sharepoint.com``
    address that is otherwise derived from the site URL.
    """

    model_config = ConfigDict(frozen=True)

    admin_uri: Optional[str] = Field(None, description="Tenant admin center URL")
    portal_uri: Optional[str] = Field(None, description="Tenant root site URL")
    my_site_uri: Optional[str] = Field(None, description="Tenant OneDrive host URL")
