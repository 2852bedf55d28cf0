"""Models package initialization."""

from .permissions import (
    PermissionGrant,
    PermissionGrant2,
    PermissionRequest,
    ServicePrincipalProperties,
)

__all__ = [
    "PermissionGrant",
    "PermissionGrant2",
    "PermissionRequest",
    "ServicePrincipalProperties",
]
