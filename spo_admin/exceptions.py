"""
Exception hierarchy shared by the authentication provider and the admin client.
"""

from typing import Any, Dict, List, Optional


class SpoAdminError(Exception):
    """Base class for all errors raised by this package."""
    pass


class ConfigurationError(SpoAdminError):
    """Raised when the provider or client is configured incorrectly."""
    pass


class CertificateLoadError(SpoAdminError):
    """Raised when a certificate cannot be located or read from a certificate store."""
    pass


class TokenAcquisitionError(SpoAdminError):
    """
    Raised when the identity library returns an error result instead of a token.

    MSAL for Python reports service failures as a result dictionary rather than
    raising, so the MSAL error fields are kept on the exception.
    """

    def __init__(self, result: Dict[str, Any]):
        self.result = result
        self.error: Optional[str] = result.get("error")
        self.error_description: Optional[str] = result.get("error_description")
        self.error_codes: List[int] = result.get("error_codes", [])
        self.correlation_id: Optional[str] = result.get("correlation_id")
        super().__init__(f"Token acquisition failed: {self.error} - {self.error_description}")


class AdminApiError(SpoAdminError):
    """Raised when the tenant admin endpoint or Microsoft Graph returns an error status."""

    def __init__(self, status_code: int, url: str, body: str = ""):
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"Admin API error {status_code} for {url}: {body}")
