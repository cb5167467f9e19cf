"""File-handle models and result types for PKI operations."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import NotRequired, TypedDict


class CertificateRole(StrEnum):
    ROOT = "root"
    LEAF = "leaf"


@dataclass(frozen=True)
class KeyPair:
    """Private key file produced by the toolkit. Never read into memory."""

    algorithm: str
    path: Path


@dataclass(frozen=True)
class CertificateSigningRequest:
    """CSR file plus the subject DN and URI identity it was requested for."""

    path: Path
    subject: str
    identity_uri: str
    key: KeyPair


@dataclass(frozen=True)
class Certificate:
    """Certificate file with its role, validity period and identity URI."""

    path: Path
    role: CertificateRole
    validity_days: int
    identity_uri: str


class CertificateMetadata(TypedDict):
    """Certificate metadata written next to issued certificates."""

    serialNumber: str
    subject: str
    issuer: str
    identityUris: list[str]
    notBefore: str
    expiry: str
    issuedAt: str
    role: NotRequired[str]


@dataclass
class BootstrapResult:
    """Result from root CA bootstrap.

    Contains file paths and serial number for Root CA artifacts.
    """

    root_key_path: Path
    root_cert_path: Path
    metadata_path: Path
    root_serial: str
    identity_uri: str


@dataclass
class IdentityCertResult:
    """Result from leaf identity provisioning.

    Contains file paths, serial number and SPIFFE ID for the leaf artifacts.
    """

    key_path: Path
    cert_path: Path
    csr_path: Path
    metadata_path: Path
    serial_number: str
    identity_uri: str
