"""
File based X.509 certificate store.

A store is a directory laid out as ``{root}/{StoreLocation}/{StoreName}/``.
Each entry is either a PEM file holding the certificate and its private key
(the key may also live in a sibling ``.key`` file) or a PKCS#12 bundle.
Certificates are looked up by their SHA-1 thumbprint.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from spo_admin.config import StoreLocation, StoreName, get_settings
from spo_admin.exceptions import CertificateLoadError

logger = logging.getLogger(__name__)

PEM_SUFFIXES = {".pem", ".crt", ".cer"}
PKCS12_SUFFIXES = {".pfx", ".p12"}

_CERTIFICATE_BLOCK = re.compile(
    rb"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----", re.DOTALL
)
_PRIVATE_KEY_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z ]*)PRIVATE KEY-----.+?-----END \1PRIVATE KEY-----", re.DOTALL
)


@dataclass(frozen=True)
class CertificateCredential:
    """A certificate together with the private key used to sign client assertions."""

    thumbprint: str
    certificate: x509.Certificate
    private_key_pem: Optional[str]
    path: Path

    @property
    def has_private_key(self) -> bool:
        return self.private_key_pem is not None

    @property
    def client_credential(self) -> Dict[str, str]:
        """Credential mapping accepted by ``msal.ConfidentialClientApplication``."""
        if self.private_key_pem is None:
            raise CertificateLoadError(f"Certificate {self.thumbprint} has no private key")
        return {"private_key": self.private_key_pem, "thumbprint": self.thumbprint}


def normalize_thumbprint(thumbprint: str) -> str:
    """Remove separators and invisible characters often pasted along with a thumbprint."""
    return re.sub(r"[^0-9A-Fa-f]", "", thumbprint).upper()


def compute_thumbprint(certificate: x509.Certificate) -> str:
    return certificate.fingerprint(hashes.SHA1()).hex().upper()


def store_directory(
    store_name: Union[StoreName, str],
    store_location: Union[StoreLocation, str],
    store_path: Optional[Path] = None,
) -> Path:
    """Resolve the directory backing a certificate store."""
    root = Path(store_path) if store_path is not None else get_settings().certificate_store_path
    return root / StoreLocation(store_location).value / StoreName(store_name).value


def _private_key_to_pem(private_key) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def _read_pem_entry(path: Path, password: Optional[bytes]) -> Optional[CertificateCredential]:
    data = path.read_bytes()
    certificate_match = _CERTIFICATE_BLOCK.search(data)
    if certificate_match:
        certificate = x509.load_pem_x509_certificate(certificate_match.group(0))
    elif data.lstrip().startswith(b"-----BEGIN"):
        return None
    else:
        # DER encoded .cer/.crt files carry no key material
        certificate = x509.load_der_x509_certificate(data)
        data = b""

    key_match = _PRIVATE_KEY_BLOCK.search(data)
    key_file = path.with_suffix(".key")
    if key_match is None and key_file.is_file():
        key_match = _PRIVATE_KEY_BLOCK.search(key_file.read_bytes())

    private_key_pem = None
    if key_match:
        encrypted = key_match.group(1) == b"ENCRYPTED "
        private_key = serialization.load_pem_private_key(
            key_match.group(0), password=password if encrypted else None
        )
        private_key_pem = _private_key_to_pem(private_key)

    return CertificateCredential(
        thumbprint=compute_thumbprint(certificate),
        certificate=certificate,
        private_key_pem=private_key_pem,
        path=path,
    )


def _read_pkcs12_entry(path: Path, password: Optional[bytes]) -> Optional[CertificateCredential]:
    private_key, certificate, _ = pkcs12.load_key_and_certificates(path.read_bytes(), password)
    if certificate is None:
        return None
    return CertificateCredential(
        thumbprint=compute_thumbprint(certificate),
        certificate=certificate,
        private_key_pem=_private_key_to_pem(private_key) if private_key is not None else None,
        path=path,
    )


def read_certificate_file(
    path: Path, password: Optional[str] = None
) -> Optional[CertificateCredential]:
    """Read a single store entry, or return None for files that are not certificates."""
    password_bytes = password.encode("utf-8") if password else None
    suffix = path.suffix.lower()
    if suffix in PEM_SUFFIXES:
        return _read_pem_entry(path, password_bytes)
    if suffix in PKCS12_SUFFIXES:
        return _read_pkcs12_entry(path, password_bytes)
    return None


def load_certificate(
    store_name: Union[StoreName, str],
    store_location: Union[StoreLocation, str],
    thumbprint: str,
    store_path: Optional[Path] = None,
    password: Optional[str] = None,
) -> CertificateCredential:
    """
    Load a certificate with its private key from a certificate store.

    Args:
        store_name: Name of the store, e.g. ``StoreName.MY``
        store_location: Location of the store, e.g. ``StoreLocation.CURRENT_USER``
        thumbprint: SHA-1 thumbprint of the certificate
        store_path: Root of the certificate stores, defaults to the configured path
        password: Password for PKCS#12 files or encrypted private keys

    Returns:
        CertificateCredential: The matching certificate

    Raises:
        CertificateLoadError: If the store or certificate cannot be found,
            or the certificate has no private key
    """
    if not thumbprint:
        raise CertificateLoadError("A certificate thumbprint is required")

    directory = store_directory(store_name, store_location, store_path)
    if not directory.is_dir():
        raise CertificateLoadError(f"Certificate store {directory} does not exist")

    wanted = normalize_thumbprint(thumbprint)
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            continue
        try:
            entry = read_certificate_file(path, password)
        except (ValueError, TypeError) as e:
            logger.warning(f"Skipping unreadable certificate store entry {path}: {e}")
            continue

        if entry is None or entry.thumbprint != wanted:
            continue

        if not entry.has_private_key:
            raise CertificateLoadError(
                f"Certificate {wanted} in {directory} has no associated private key"
            )
        logger.debug(f"Loaded certificate {wanted} from {path}")
        return entry

    raise CertificateLoadError(f"Certificate with thumbprint {wanted} not found in {directory}")
