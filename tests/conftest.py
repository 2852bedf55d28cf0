from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from unittest.mock import patch

import httpx
import pytest
from cryptography import x509

from spo_admin.auth import AuthenticationProvider
from spo_admin.config import Settings

from .certs import certificate_pem, make_certificate, private_key_pem, thumbprint_of


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "certstore"


@pytest.fixture
def my_store(store_root: Path) -> Path:
    directory = store_root / "CurrentUser" / "My"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def installed_certificate(my_store: Path) -> Tuple[str, x509.Certificate]:
    """A certificate with its private key installed in CurrentUser/My."""
    certificate, key = make_certificate()
    (my_store / "app.pem").write_bytes(certificate_pem(certificate) + private_key_pem(key))
    return thumbprint_of(certificate), certificate


@pytest.fixture
def settings(store_root: Path) -> Settings:
    return Settings(
        _env_file=None,
        client_id="11111111-2222-3333-4444-555555555555",
        tenant_id="contoso.onmicrosoft.com",
        certificate_store_path=store_root,
        site_url="https://contoso.sharepoint.com",
    )


@pytest.fixture
def msal_app():
    """Patch the MSAL confidential client, returning the mocked class."""
    with patch("spo_admin.auth.x509_provider.msal.ConfidentialClientApplication") as app_class:
        app_class.return_value.acquire_token_for_client.return_value = {
            "access_token": "token-123",
            "token_type": "Bearer",
            "expires_in": 3599,
        }
        yield app_class


class StaticTokenProvider(AuthenticationProvider):
    """Provider issuing a predictable token per host."""

    def __init__(self) -> None:
        self.resources: List[str] = []

    async def authenticate_request(
        self, resource: Optional[httpx.URL], request: Optional[httpx.Request]
    ) -> None:
        self.resources.append(str(resource))
        request.headers["Authorization"] = f"Bearer token-for-{httpx.URL(str(resource)).host}"

    async def get_access_token_for_scopes(self, resource, scopes: Optional[Sequence[str]]) -> str:
        return f"token-for-{' '.join(scopes)}"


@pytest.fixture
def token_provider() -> StaticTokenProvider:
    return StaticTokenProvider()
