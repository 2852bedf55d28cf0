"""
Authentication provider based on an X.509 certificate credential.

Tokens are acquired with the OAuth client credentials flow through MSAL,
which also owns token caching for the lifetime of the provider.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence, Union

import httpx
import msal

from spo_admin.auth.base import AuthenticationProvider, Resource, absolute_url
from spo_admin.auth.certificates import CertificateCredential, load_certificate
from spo_admin.config import (
    DEFAULT_CLIENT_ID,
    ORGANIZATIONS_TENANT_ID,
    CredentialConfigurationOptions,
    Settings,
    StoreLocation,
    StoreName,
    X509CertificateOptions,
    get_settings,
)
from spo_admin.exceptions import ConfigurationError, TokenAcquisitionError

logger = logging.getLogger(__name__)


class X509CertificateAuthenticationProvider(AuthenticationProvider):
    """
    Acquires app-only tokens with a certificate loaded from a certificate store.

    The provider starts uninitialized and becomes usable after a single call
    to :meth:`init`. The confidential client application built there is kept
    for the lifetime of the instance; rotating the certificate or the
    authority requires a new provider.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.client_id: Optional[str] = None
        self.tenant_id: Optional[str] = None
        self.certificate: Optional[CertificateCredential] = None
        # Instance level so the MSAL token cache is kept per provider
        self._client_application: Optional[msal.ConfidentialClientApplication] = None

    @classmethod
    def from_certificate(
        cls,
        client_id: Optional[str],
        tenant_id: Optional[str],
        store_name: Union[StoreName, str],
        store_location: Union[StoreLocation, str],
        thumbprint: str,
        settings: Optional[Settings] = None,
    ) -> "X509CertificateAuthenticationProvider":
        """Create an initialized provider from explicit credentials."""
        provider = cls(settings)
        provider.init(
            CredentialConfigurationOptions(
                client_id=client_id,
                tenant_id=tenant_id,
                x509_certificate=X509CertificateOptions(
                    store_name=store_name,
                    store_location=store_location,
                    thumbprint=thumbprint,
                ),
            )
        )
        return provider

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None
    ) -> "X509CertificateAuthenticationProvider":
        """Create an initialized provider from the environment configuration."""
        settings = settings or get_settings()
        provider = cls(settings)
        provider.init(settings.credential_options)
        return provider

    @property
    def is_initialized(self) -> bool:
        return self._client_application is not None

    @property
    def authority(self) -> str:
        """Authority URL for the configured tenant."""
        if self.tenant_id is None:
            raise ConfigurationError("The authentication provider has not been initialized")
        if self.tenant_id.lower() == ORGANIZATIONS_TENANT_ID:
            return f"{self.settings.authority_host}/{ORGANIZATIONS_TENANT_ID}"
        return f"{self.settings.authority_host}/{self.tenant_id}"

    def init(self, options: Optional[CredentialConfigurationOptions]) -> None:
        """
        Initialize the provider.

        Args:
            options: Client id, tenant id and certificate reference

        Raises:
            ConfigurationError: If the certificate options or thumbprint are
                missing, or the provider was already initialized
            CertificateLoadError: If the certificate cannot be loaded
        """
        if self.is_initialized:
            raise ConfigurationError(
                "The authentication provider is already initialized, create a new instance instead"
            )

        if options is None or options.x509_certificate is None:
            raise ConfigurationError(
                "X.509 certificate options are required for certificate authentication"
            )

        certificate_options = options.x509_certificate
        if not certificate_options.thumbprint:
            raise ConfigurationError("The X.509 certificate thumbprint must be provided")

        self.client_id = options.client_id or DEFAULT_CLIENT_ID
        self.tenant_id = options.tenant_id or ORGANIZATIONS_TENANT_ID
        self.certificate = load_certificate(
            certificate_options.store_name,
            certificate_options.store_location,
            certificate_options.thumbprint,
            store_path=self.settings.certificate_store_path,
            password=self.settings.certificate_password,
        )

        logger.info(
            f"Initialized X.509 certificate authentication with certificate "
            f"{certificate_options.thumbprint} from store "
            f"{certificate_options.store_name.value}/{certificate_options.store_location.value}"
        )

        self._client_application = msal.ConfidentialClientApplication(
            self.client_id,
            authority=self.authority,
            client_credential=self.certificate.client_credential,
        )

    def _require_client_application(self) -> msal.ConfidentialClientApplication:
        if self._client_application is None:
            raise ConfigurationError("The authentication provider has not been initialized")
        return self._client_application

    async def authenticate_request(
        self, resource: Optional[Resource], request: Optional[httpx.Request]
    ) -> None:
        """
        Authenticate the request with a bearer token for the resource.

        Args:
            resource: Resource the request targets
            request: The request to authenticate

        Raises:
            ValueError: If the request or resource is missing
        """
        if request is None:
            raise ValueError("request must be provided")

        if resource is None:
            raise ValueError("resource must be provided")

        token = await self.get_access_token(resource)
        request.headers["Authorization"] = f"Bearer {token}"

    async def get_access_token_for_scopes(
        self, resource: Optional[Resource], scopes: Optional[Sequence[str]]
    ) -> str:
        """
        Get an access token for the requested resource and scopes.

        Tokens are served from the MSAL cache when still valid. Errors raised
        by MSAL are not handled here.

        Args:
            resource: Resource to request an access token for
            scopes: Scopes to request

        Returns:
            str: The access token

        Raises:
            ValueError: If the resource is missing or not absolute, or scopes are missing
            TokenAcquisitionError: If MSAL returns an error result
        """
        if resource is None:
            raise ValueError("resource must be provided")
        absolute_url(resource)

        if scopes is None:
            raise ValueError("scopes must be provided")

        client_application = self._require_client_application()
        scopes = list(scopes)

        result: Dict[str, Any] = await asyncio.to_thread(
            client_application.acquire_token_for_client, scopes=scopes
        )
        if "access_token" not in result:
            logger.error(
                f"Token acquisition for {resource} failed: "
                f"{result.get('error')} - {result.get('error_description')}"
            )
            raise TokenAcquisitionError(result)

        logger.info(f"Access token retrieved for {resource} with scopes {', '.join(scopes)}")
        return result["access_token"]
