"""SharePoint Online admin SDK: service principal grants and certificate authentication."""

from .admin import BlockingServicePrincipal, ServicePrincipal, ServicePrincipalClient
from .auth import AuthenticationProvider, X509CertificateAuthenticationProvider

__version__ = "0.1.0"

__all__ = [
    "AuthenticationProvider",
    "BlockingServicePrincipal",
    "ServicePrincipal",
    "ServicePrincipalClient",
    "X509CertificateAuthenticationProvider",
]
