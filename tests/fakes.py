"""In-memory service principal used by the tests."""

from typing import Dict, Optional

from spo_admin.admin import ServicePrincipal
from spo_admin.models import (
    PermissionGrant2,
    PermissionRequest,
    ServicePrincipalProperties,
)


class InMemoryServicePrincipal(ServicePrincipal):
    """Service principal keeping requests and grants in memory."""

    def __init__(self) -> None:
        self.enabled = False
        self.closed = False
        self.requests: Dict[str, PermissionRequest] = {
            "req-1": PermissionRequest(id="req-1", resource="Microsoft Graph", scope="User.Read"),
        }
        self.grants: Dict[str, PermissionGrant2] = {}

    async def get_permission_requests2(self, vanity_url_options=None):
        return list(self.requests.values())

    async def approve_permission_request2(self, id, vanity_url_options=None):
        request = self.requests.pop(id)
        grant = PermissionGrant2(
            id=f"grant-{id}", resource=request.resource, scope=request.scope or ""
        )
        self.grants[grant.id] = grant
        return grant

    async def deny_permission_request2(self, id, vanity_url_options=None):
        self.requests.pop(id)

    async def enable2(self, vanity_url_options=None):
        self.enabled = True
        return ServicePrincipalProperties(account_enabled=True)

    async def disable2(self, vanity_url_options=None):
        self.enabled = False
        return ServicePrincipalProperties(account_enabled=False)

    async def list_grants2(self, vanity_url_options=None):
        return list(self.grants.values())

    async def add_grant2(self, resource, scope, vanity_url_options=None):
        grant = PermissionGrant2(id=f"grant-{len(self.grants) + 1}", resource=resource, scope=scope)
        self.grants[grant.id] = grant
        return grant

    async def revoke_grant2(
        self, grant_id, scope, vanity_url_options=None
    ) -> Optional[PermissionGrant2]:
        grant = self.grants[grant_id]
        remaining = [s for s in grant.scopes if s != scope]
        if not remaining:
            del self.grants[grant_id]
            return None
        grant = grant.model_copy(update={"scope": " ".join(remaining)})
        self.grants[grant_id] = grant
        return grant

    async def delete_grant2(self, grant_id, vanity_url_options=None):
        del self.grants[grant_id]

    async def close(self):
        self.closed = True
