"""Authentication package initialization."""

from .base import (
    AuthenticationProvider,
    AuthenticationProviderAuth,
    default_scopes,
)
from .certificates import CertificateCredential, load_certificate
from .x509_provider import X509CertificateAuthenticationProvider

__all__ = [
    "AuthenticationProvider",
    "AuthenticationProviderAuth",
    "CertificateCredential",
    "X509CertificateAuthenticationProvider",
    "default_scopes",
    "load_certificate",
]
