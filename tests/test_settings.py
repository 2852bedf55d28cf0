"""
Tests for environment based configuration.
"""

import pytest
from pydantic import ValidationError

from spo_admin.config import (
    DEFAULT_CLIENT_ID,
    Settings,
    StoreLocation,
    StoreName,
    VanityUrlOptions,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in (
        "CLIENT_ID",
        "TENANT_ID",
        "CERTIFICATE_THUMBPRINT",
        "CERTIFICATE_STORE_NAME",
        "CERTIFICATE_STORE_LOCATION",
        "ADMIN_URL",
        "AUTHORITY_HOST",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.client_id == DEFAULT_CLIENT_ID
    assert settings.tenant_id == "organizations"
    assert settings.certificate_store_name is StoreName.MY
    assert settings.certificate_store_location is StoreLocation.CURRENT_USER
    assert settings.certificate_thumbprint is None
    assert settings.vanity_url_options is None


def test_values_read_from_environment(monkeypatch):
    monkeypatch.setenv("TENANT_ID", " contoso.onmicrosoft.com ")
    monkeypatch.setenv("CERTIFICATE_THUMBPRINT", "ABCDEF")
    monkeypatch.setenv("CERTIFICATE_STORE_LOCATION", "LocalMachine")
    monkeypatch.setenv("AUTHORITY_HOST", "https://login.microsoftonline.us/")

    settings = Settings(_env_file=None)

    assert settings.tenant_id == "contoso.onmicrosoft.com"
    assert settings.certificate_store_location is StoreLocation.LOCAL_MACHINE
    assert settings.authority == "https://login.microsoftonline.us/contoso.onmicrosoft.com"

    options = settings.credential_options
    assert options.tenant_id == "contoso.onmicrosoft.com"
    assert options.x509_certificate.thumbprint == "ABCDEF"
    assert options.x509_certificate.store_location is StoreLocation.LOCAL_MACHINE


def test_blank_thumbprint_is_not_configured():
    settings = Settings(_env_file=None, certificate_thumbprint="   ")

    assert settings.certificate_thumbprint is None
    assert settings.credential_options.x509_certificate.thumbprint is None


def test_empty_client_id_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, client_id=" ")


def test_admin_url_becomes_vanity_url_options():
    settings = Settings(_env_file=None, admin_url="https://admin.contoso.com")

    assert settings.vanity_url_options == VanityUrlOptions(admin_uri="https://admin.contoso.com")


def test_options_are_immutable():
    options = Settings(_env_file=None).credential_options

    with pytest.raises(ValidationError):
        options.client_id = "other"
