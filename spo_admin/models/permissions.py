"""
Models for the SharePoint Online Client Extensibility service principal.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def split_scopes(scope: Optional[str]) -> List[str]:
    """Split a space separated scope string."""
    if not scope:
        return []
    return scope.split()


class PermissionRequest(BaseModel):
    """
    A pending permission request raised by a deployed SharePoint Framework package.
    """

    id: str = Field(..., description="Permission request id")
    resource: Optional[str] = Field(None, description="Resource display name, e.g. Microsoft Graph")
    resource_id: Optional[str] = Field(None, description="Object id of the resource principal")
    scope: Optional[str] = Field(None, description="Requested scope, e.g. User.Read.All")

    package_name: Optional[str] = Field(None, description="Package that raised the request")
    package_version: Optional[str] = Field(None, description="Version of the package")
    package_approver_name: Optional[str] = Field(None, description="Approver named in the package")

    is_domain_isolated: bool = Field(False, description="Whether the package is domain isolated")
    isolated_domain_url: Optional[str] = Field(None, description="Isolated domain URL")
    multi_tenant_app_id: Optional[str] = Field(None, description="Multi-tenant application id")
    multi_tenant_app_reply_url: Optional[str] = Field(None, description="Multi-tenant reply URL")

    time_requested: Optional[datetime] = Field(None, description="When the request was raised")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PermissionRequest":
        """Create a PermissionRequest from a tenant admin REST payload."""
        return cls(
            id=str(payload["Id"]),
            resource=payload.get("Resource"),
            resource_id=payload.get("ResourceId"),
            scope=payload.get("Scope"),
            package_name=payload.get("PackageName"),
            package_version=payload.get("PackageVersion"),
            package_approver_name=payload.get("PackageApproverName"),
            is_domain_isolated=bool(payload.get("IsDomainIsolated", False)),
            isolated_domain_url=payload.get("IsolatedDomainUrl"),
            multi_tenant_app_id=payload.get("MultiTenantAppId"),
            multi_tenant_app_reply_url=payload.get("MultiTenantAppReplyUrl"),
            time_requested=payload.get("TimeRequested"),
        )


class PermissionGrant2(BaseModel):
    """
    An OAuth2 permission grant of the service principal as exposed by Microsoft Graph.
    """

    id: str = Field(..., description="Grant id, used to revoke scopes or delete the grant")
    client_id: Optional[str] = Field(None, description="Object id of the client principal")
    consent_type: Optional[str] = Field(None, description="AllPrincipals or Principal")
    principal_id: Optional[str] = Field(None, description="User the grant applies to, if any")
    resource_id: Optional[str] = Field(None, description="Object id of the resource principal")
    resource: Optional[str] = Field(None, description="Resource display name, when known")
    scope: str = Field("", description="Space separated granted scopes")
    package_name: Optional[str] = Field(
        None, description="Package the grant was approved for, when approved from a request"
    )
    is_domain_isolated: Optional[bool] = Field(
        None, description="Whether the approved package is domain isolated"
    )

    @classmethod
    def from_payload(
        cls, payload: Dict[str, Any], resource: Optional[str] = None
    ) -> "PermissionGrant2":
        """Create a PermissionGrant2 from a Microsoft Graph oAuth2PermissionGrant."""
        return cls(
            id=payload["id"],
            client_id=payload.get("clientId"),
            consent_type=payload.get("consentType"),
            principal_id=payload.get("principalId"),
            resource_id=payload.get("resourceId"),
            resource=resource,
            scope=payload.get("scope") or "",
        )

    @property
    def scopes(self) -> List[str]:
        return split_scopes(self.scope)

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes


class PermissionGrant(BaseModel):
    """
    A permission grant in the shape returned by the tenant admin REST API.
    """

    object_id: str = Field(..., description="Grant object id")
    client_id: Optional[str] = Field(None, description="Object id of the client principal")
    consent_type: Optional[str] = Field(None, description="AllPrincipals or Principal")
    resource: Optional[str] = Field(None, description="Resource display name")
    resource_id: Optional[str] = Field(None, description="Object id of the resource principal")
    scope: str = Field("", description="Space separated granted scopes")
    package_name: Optional[str] = Field(None, description="Package the grant was approved for")
    is_domain_isolated: bool = Field(False, description="Whether the grant is domain isolated")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PermissionGrant":
        """Create a PermissionGrant from a tenant admin REST payload."""
        return cls(
            object_id=payload["ObjectId"],
            client_id=payload.get("ClientId"),
            consent_type=payload.get("ConsentType"),
            resource=payload.get("Resource"),
            resource_id=payload.get("ResourceId"),
            scope=payload.get("Scope") or "",
            package_name=payload.get("PackageName"),
            is_domain_isolated=bool(payload.get("IsDomainIsolated", False)),
        )

    @classmethod
    def from_grant2(cls, grant: PermissionGrant2) -> "PermissionGrant":
        return cls(
            object_id=grant.id,
            client_id=grant.client_id,
            consent_type=grant.consent_type,
            resource=grant.resource,
            resource_id=grant.resource_id,
            scope=grant.scope,
            package_name=grant.package_name,
            is_domain_isolated=bool(grant.is_domain_isolated),
        )

    def to_grant2(self) -> PermissionGrant2:
        return PermissionGrant2(
            id=self.object_id,
            client_id=self.client_id,
            consent_type=self.consent_type,
            resource_id=self.resource_id,
            resource=self.resource,
            scope=self.scope,
            package_name=self.package_name,
            is_domain_isolated=self.is_domain_isolated,
        )


class ServicePrincipalProperties(BaseModel):
    """State of the SharePoint Online Client Extensibility service principal."""

    id: Optional[str] = Field(None, description="Object id of the service principal")
    app_id: Optional[str] = Field(None, description="Application id of the service principal")
    account_enabled: bool = Field(False, description="Whether the principal is enabled")
    reply_urls: List[str] = Field(default_factory=list, description="Configured reply URLs")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ServicePrincipalProperties":
        """Create properties from a Microsoft Graph servicePrincipal."""
        return cls(
            id=payload.get("id"),
            app_id=payload.get("appId"),
            account_enabled=bool(payload.get("accountEnabled", False)),
            reply_urls=payload.get("replyUrls") or [],
        )
