"""Service principal administration package initialization."""

from .blocking import BlockingServicePrincipal
from .client import SERVICE_PRINCIPAL_DISPLAY_NAME, ServicePrincipalClient
from .service_principal import ServicePrincipal

__all__ = [
    "SERVICE_PRINCIPAL_DISPLAY_NAME",
    "BlockingServicePrincipal",
    "ServicePrincipal",
    "ServicePrincipalClient",
]
