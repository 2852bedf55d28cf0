"""
Authentication provider contract and its httpx integration.
"""

from abc import ABC, abstractmethod
from typing import AsyncGenerator, Generator, List, Optional, Sequence, Union

import httpx

Resource = Union[str, httpx.URL]


def absolute_url(resource: Resource) -> httpx.URL:
    """Parse ``resource`` as an absolute URL, raising ValueError otherwise."""
    url = httpx.URL(str(resource))
    if not url.scheme or not url.host:
        raise ValueError(f"resource must be an absolute URL, got {str(resource)!r}")
    return url


def resource_authority(resource: Resource) -> str:
    """Host of the resource, including the port when it is not the scheme default."""
    url = absolute_url(resource)
    if url.port is None:
        return url.host
    return f"{url.host}:{url.port}"


def default_scopes(resource: Resource) -> List[str]:
    """
    Get the ``.default`` scope for a resource.

    Args:
        resource: Resource URL, e.g. ``https://contoso.sharepoint.com/sites/hr``

    Returns:
        List with the single scope ``{scheme}://{authority}/.default``

    Raises:
        ValueError: If the resource is not an absolute URL
    """
    url = absolute_url(resource)
    return [f"{url.scheme}://{resource_authority(url)}/.default"]


class AuthenticationProvider(ABC):
    """
    Supplies bearer tokens for requests sent to a resource.

    Implementations wrap an identity library; callers only depend on
    "acquire token for (resource, scopes)".
    """

    @abstractmethod
    async def authenticate_request(
        self, resource: Optional[Resource], request: Optional[httpx.Request]
    ) -> None:
        """Set the bearer authorization header of ``request`` for ``resource``."""

    @abstractmethod
    async def get_access_token_for_scopes(
        self, resource: Optional[Resource], scopes: Optional[Sequence[str]]
    ) -> str:
        """Get an access token for ``resource`` with explicit ``scopes``."""

    async def get_access_token(self, resource: Optional[Resource]) -> str:
        """Get an access token for ``resource`` using its ``.default`` scope."""
        if resource is None:
            raise ValueError("resource must be provided")
        return await self.get_access_token_for_scopes(resource, default_scopes(resource))


class AuthenticationProviderAuth(httpx.Auth):
    """
    httpx auth flow delegating to an :class:`AuthenticationProvider`.

    The request URL is used as the resource, so the token audience follows
    the host each request is sent to.
    """

    def __init__(self, provider: AuthenticationProvider):
        self.provider = provider

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("AuthenticationProviderAuth requires an httpx.AsyncClient")

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        await self.provider.authenticate_request(request.url, request)
        yield request
