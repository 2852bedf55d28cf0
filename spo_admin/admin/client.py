"""
HTTP implementation of the service principal contract.

Permission requests are handled by the tenant admin REST API, the service
principal itself and its OAuth2 permission grants through Microsoft Graph.
Requests are authenticated by an :class:`AuthenticationProvider`.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from spo_admin.admin.service_principal import ServicePrincipal
from spo_admin.auth import AuthenticationProvider, AuthenticationProviderAuth
from spo_admin.config import Settings, VanityUrlOptions, get_settings
from spo_admin.exceptions import AdminApiError, ConfigurationError
from spo_admin.models import (
    PermissionGrant,
    PermissionGrant2,
    PermissionRequest,
    ServicePrincipalProperties,
)

logger = logging.getLogger(__name__)

SERVICE_PRINCIPAL_DISPLAY_NAME = "SharePoint Online Client Extensibility Web Application Principal"

TENANT_ADMIN_SERVICE_PRINCIPAL_PATH = (
    "_api/Microsoft.Online.SharePoint.TenantAdministration.Internal.SPOWebAppServicePrincipal"
)

SHAREPOINT_REST_HEADERS = {
    "Accept": "application/json;odata=nometadata",
    "Content-Type": "application/json;odata=nometadata",
}


def _odata_literal(value: str) -> str:
    return value.replace("'", "''")


def admin_url_from_site_url(site_url: str) -> str:
    """
    Derive the tenant admin center URL from any site URL of the tenant.

    ``https://contoso.sharepoint.com/sites/hr`` becomes
    ``https://contoso-admin.sharepoint.com``.
    """
    url = httpx.URL(site_url)
    host = url.host
    if not host.endswith(".sharepoint.com"):
        raise ConfigurationError(
            f"Cannot derive the admin URL from {site_url}, "
            f"provide VanityUrlOptions.admin_uri for tenants using vanity domains"
        )

    tenant = host.split(".", 1)[0]
    suffix = host[len(tenant):]
    if tenant.endswith("-admin"):
        return f"https://{host}"
    if tenant.endswith("-my"):
        tenant = tenant[: -len("-my")]
    return f"https://{tenant}-admin{suffix}"


class ServicePrincipalClient(ServicePrincipal):
    """
    Manage the SharePoint Online Client Extensibility service principal over HTTP.

    Usage:
        provider = X509CertificateAuthenticationProvider.from_settings()
        async with ServicePrincipalClient(provider, "https://contoso.sharepoint.com") as client:
            grants = await client.list_grants2()
    """

    def __init__(
        self,
        auth_provider: AuthenticationProvider,
        site_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.site_url = site_url or self.settings.site_url
        self.graph_base_url = self.settings.graph_base_url
        self._auth = AuthenticationProviderAuth(auth_provider)
        self._http_client = http_client
        self._owns_http_client = http_client is None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client when it is owned by this instance."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
            logger.info("ServicePrincipalClient HTTP client closed")

    async def __aenter__(self) -> "ServicePrincipalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # Transport helpers

    def admin_url(self, vanity_url_options: Optional[VanityUrlOptions] = None) -> str:
        """Resolve the tenant admin center URL for a request."""
        vanity_url_options = vanity_url_options or self.settings.vanity_url_options
        if vanity_url_options is not None and vanity_url_options.admin_uri:
            return vanity_url_options.admin_uri.rstrip("/")
        if not self.site_url:
            raise ConfigurationError("A site URL or VanityUrlOptions.admin_uri is required")
        return admin_url_from_site_url(self.site_url)

    def _tenant_admin_endpoint(
        self, path: str, vanity_url_options: Optional[VanityUrlOptions]
    ) -> str:
        base = f"{self.admin_url(vanity_url_options)}/{TENANT_ADMIN_SERVICE_PRINCIPAL_PATH}"
        return f"{base}/{path}" if path else base

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = await self.http_client.request(method, url, auth=self._auth, **kwargs)
        if response.status_code >= 400:
            logger.error(f"{method} {url} failed with {response.status_code}: {response.text}")
            raise AdminApiError(response.status_code, url, response.text)
        return response

    async def _get_json(
        self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> Dict[str, Any]:
        response = await self._request("GET", url, params=params, **kwargs)
        return response.json()

    async def _paged_get(
        self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        next_url: Optional[str] = url
        while next_url:
            data = await self._get_json(next_url, params, **kwargs)
            items.extend(data.get("value", []))
            # Graph uses @odata.nextLink, SharePoint nometadata responses odata.nextLink
            next_url = data.get("@odata.nextLink") or data.get("odata.nextLink")
            # the next link already carries the query
            params = None
        return items

    async def _find_service_principal(
        self, display_name: str, select: str = "id,appId,displayName,accountEnabled,replyUrls"
    ) -> Dict[str, Any]:
        matches = await self._paged_get(
            f"{self.graph_base_url}/servicePrincipals",
            params={
                "$filter": f"displayName eq '{_odata_literal(display_name)}'",
                "$select": select,
            },
        )
        if not matches:
            url = f"{self.graph_base_url}/servicePrincipals"
            raise AdminApiError(404, url, f"Service principal '{display_name}' not found")
        return matches[0]

    async def _set_account_enabled(self, enabled: bool) -> ServicePrincipalProperties:
        principal = await self._find_service_principal(SERVICE_PRINCIPAL_DISPLAY_NAME)
        await self._request(
            "PATCH",
            f"{self.graph_base_url}/servicePrincipals/{principal['id']}",
            json={"accountEnabled": enabled},
        )
        logger.info(f"Service principal {principal['id']} accountEnabled set to {enabled}")
        properties = ServicePrincipalProperties.from_payload(principal)
        return properties.model_copy(update={"account_enabled": enabled})

    async def _resource_display_names(self, resource_ids: List[str]) -> Dict[str, str]:
        names: Dict[str, str] = {}
        for resource_id in resource_ids:
            if resource_id in names:
                continue
            data = await self._get_json(
                f"{self.graph_base_url}/servicePrincipals/{resource_id}",
                params={"$select": "id,displayName"},
            )
            names[resource_id] = data.get("displayName")
        return names

    # Permission requests

    async def get_permission_requests2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> List[PermissionRequest]:
        url = self._tenant_admin_endpoint("PermissionRequests", vanity_url_options)
        items = await self._paged_get(url, headers=SHAREPOINT_REST_HEADERS)
        return [PermissionRequest.from_payload(item) for item in items]

    async def approve_permission_request2(
        self, id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant2:
        if not id:
            raise ValueError("permission request id must be provided")

        url = self._tenant_admin_endpoint(f"PermissionRequests('{id}')/Approve", vanity_url_options)
        response = await self._request("POST", url, headers=SHAREPOINT_REST_HEADERS, json={})
        grant = PermissionGrant.from_payload(response.json())
        logger.info(f"Permission request {id} approved as grant {grant.object_id}")
        return grant.to_grant2()

    async def deny_permission_request2(
        self, id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> None:
        if not id:
            raise ValueError("permission request id must be provided")

        url = self._tenant_admin_endpoint(f"PermissionRequests('{id}')/Deny", vanity_url_options)
        await self._request("POST", url, headers=SHAREPOINT_REST_HEADERS, json={})
        logger.info(f"Permission request {id} denied")

    # Service principal

    async def enable2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> ServicePrincipalProperties:
        return await self._set_account_enabled(True)

    async def disable2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> ServicePrincipalProperties:
        return await self._set_account_enabled(False)

    # Grants

    async def list_grants2(
        self, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> List[PermissionGrant2]:
        principal = await self._find_service_principal(SERVICE_PRINCIPAL_DISPLAY_NAME, select="id")
        items = await self._paged_get(
            f"{self.graph_base_url}/oauth2PermissionGrants",
            params={"$filter": f"clientId eq '{principal['id']}'"},
        )
        names = await self._resource_display_names(
            [item["resourceId"] for item in items if item.get("resourceId")]
        )
        return [
            PermissionGrant2.from_payload(item, resource=names.get(item.get("resourceId")))
            for item in items
        ]

    async def get_grant2(
        self, grant_id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant2:
        if not grant_id:
            raise ValueError("grant id must be provided")

        data = await self._get_json(f"{self.graph_base_url}/oauth2PermissionGrants/{grant_id}")
        return PermissionGrant2.from_payload(data)

    async def add_grant2(
        self, resource: str, scope: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> PermissionGrant2:
        if not resource:
            raise ValueError("resource must be provided")
        if not scope:
            raise ValueError("scope must be provided")

        principal = await self._find_service_principal(SERVICE_PRINCIPAL_DISPLAY_NAME, select="id")
        resource_principal = await self._find_service_principal(resource, select="id,displayName")

        existing = await self._paged_get(
            f"{self.graph_base_url}/oauth2PermissionGrants",
            params={
                "$filter": (
                    f"clientId eq '{principal['id']}' "
                    f"and resourceId eq '{resource_principal['id']}'"
                )
            },
        )

        if existing:
            grant = PermissionGrant2.from_payload(existing[0], resource=resource)
            if grant.has_scope(scope):
                logger.debug(f"Scope {scope} already granted on {resource}")
                return grant

            updated_scope = " ".join(grant.scopes + [scope])
            await self._request(
                "PATCH",
                f"{self.graph_base_url}/oauth2PermissionGrants/{grant.id}",
                json={"scope": updated_scope},
            )
            logger.info(f"Scope {scope} added to grant {grant.id} on {resource}")
            return grant.model_copy(update={"scope": updated_scope})

        response = await self._request(
            "POST",
            f"{self.graph_base_url}/oauth2PermissionGrants",
            json={
                "clientId": principal["id"],
                "consentType": "AllPrincipals",
                "resourceId": resource_principal["id"],
                "scope": scope,
            },
        )
        grant = PermissionGrant2.from_payload(response.json(), resource=resource)
        logger.info(f"Grant {grant.id} created for scope {scope} on {resource}")
        return grant

    async def revoke_grant2(
        self, grant_id: str, scope: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> Optional[PermissionGrant2]:
        if not scope:
            raise ValueError("scope must be provided")

        grant = await self.get_grant2(grant_id)
        if not grant.has_scope(scope):
            logger.debug(f"Scope {scope} is not part of grant {grant_id}")
            return grant

        remaining = [s for s in grant.scopes if s != scope]
        if not remaining:
            await self.delete_grant2(grant_id)
            return None

        updated_scope = " ".join(remaining)
        await self._request(
            "PATCH",
            f"{self.graph_base_url}/oauth2PermissionGrants/{grant_id}",
            json={"scope": updated_scope},
        )
        logger.info(f"Scope {scope} revoked from grant {grant_id}")
        return grant.model_copy(update={"scope": updated_scope})

    async def delete_grant2(
        self, grant_id: str, vanity_url_options: Optional[VanityUrlOptions] = None
    ) -> None:
        if not grant_id:
            raise ValueError("grant id must be provided")

        await self._request("DELETE", f"{self.graph_base_url}/oauth2PermissionGrants/{grant_id}")
        logger.info(f"Grant {grant_id} deleted")
