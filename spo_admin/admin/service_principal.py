"""
Contract for managing the SharePoint Online Client Extensibility Web Application Principal.

The ``*2`` operations are authoritative. The older names remain as
deprecated forwarding calls that convert results to the legacy models.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from typing_extensions import deprecated

from spo_admin.config import VanityUrlOptions
from spo_admin.exceptions import AdminApiError
from spo_admin.models import (
    PermissionGrant,
    PermissionGrant2,
    PermissionRequest,
    ServicePrincipalProperties,
)


class ServicePrincipal(ABC):
    """
    Manage the SharePoint apps service principal and its permission grants.

    Every operation accepts an optional :class:`VanityUrlOptions` for tenants
    reachable through custom domains.
    """

    @abstractmethod
    async def get_permission_requests2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> List[PermissionRequest]:
        """List pending permission requests."""

    @abstractmethod
    async def approve_permission_request2(
        self, id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant2:
        """Approve a permission request and return the resulting grant."""

    @abstractmethod
    async def deny_permission_request2(
        self, id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> None:
        """Deny a permission request."""

    @abstractmethod
    async def enable2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> ServicePrincipalProperties:
        """Enable the service principal."""

    @abstractmethod
    async def disable2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> ServicePrincipalProperties:
        """Disable the service principal."""

    @abstractmethod
    async def list_grants2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> List[PermissionGrant2]:
        """List all OAuth2 permissions granted to the service principal."""

    @abstractmethod
    async def add_grant2(
        self, resource: str, scope: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant2:
        """
        Grant a scope on a resource.

        Args:
            resource: Display name of the resource, e.g. ``Microsoft Graph``
            scope: Scope to grant, e.g. ``User.ReadBasic.All``
        """

    @abstractmethod
    async def revoke_grant2(
        self, grant_id: str, scope: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> Optional[PermissionGrant2]:
        """
        Remove a scope from an existing grant.

        Returns:
            The updated grant, or None when the last scope was removed and the
            grant no longer exists
        """

    @abstractmethod
    async def delete_grant2(
        self, grant_id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> None:
        """Delete a grant with all its scopes."""

    # Legacy operations

    @deprecated("Use get_permission_requests2 instead")
    async def get_permission_requests(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> List[PermissionRequest]:
        return await self.get_permission_requests2(vanity_url_options)

    @deprecated("Use approve_permission_request2 instead")
    async def approve_permission_request(
        self, id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant:
        grant = await self.approve_permission_request2(id, vanity_url_options)
        return PermissionGrant.from_grant2(grant)

    @deprecated("Use deny_permission_request2 instead")
    async def deny_permission_request(
        self, id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> None:
        await self.deny_permission_request2(id, vanity_url_options)

    @deprecated("Use enable2 instead")
    async def enable(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> ServicePrincipalProperties:
        return await self.enable2(vanity_url_options)

    @deprecated("Use disable2 instead")
    async def disable(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> ServicePrincipalProperties:
        return await self.disable2(vanity_url_options)

    @deprecated("Use list_grants2 instead")
    async def list_grants(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> List[PermissionGrant]:
        grants = await self.list_grants2(vanity_url_options)
        return [PermissionGrant.from_grant2(grant) for grant in grants]

    @deprecated("Use add_grant2 instead")
    async def add_grant(
        self, resource: str, scope: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant:
        grant = await self.add_grant2(resource, scope, vanity_url_options)
        return PermissionGrant.from_grant2(grant)

    @deprecated("Use revoke_grant2 or delete_grant2 instead")
    async def revoke_grant(
        self, object_id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant:
        """Revoke a whole grant and return it as it was before the revocation."""
        grant = await self.get_grant2(object_id, vanity_url_options)
        await self.delete_grant2(object_id, vanity_url_options)
        return PermissionGrant.from_grant2(grant)

    async def get_grant2(
        self, grant_id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant2:
        """Get a single grant by id."""
        for grant in await self.list_grants2(vanity_url_options):
            if grant.id == grant_id:
                return grant
        raise AdminApiError(
            404, f"oauth2PermissionGrants/{grant_id}", f"Permission grant {grant_id} not found"
        )
