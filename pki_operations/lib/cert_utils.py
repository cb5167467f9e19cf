"""Inspection helpers for certificates and CSRs written by the toolkit."""

from datetime import UTC, datetime
from pathlib import Path

from cryptography import x509
from cryptography.exceptions import InvalidSignature

from .models import CertificateMetadata, CertificateRole


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize certificate from PEM bytes."""
    return x509.load_pem_x509_certificate(pem_data)


def deserialize_csr(pem_data: bytes) -> x509.CertificateSigningRequest:
    """Deserialize CSR from PEM bytes."""
    return x509.load_pem_x509_csr(pem_data)


def load_certificate(path: Path) -> x509.Certificate:
    return deserialize_certificate(Path(path).read_bytes())


def load_csr(path: Path) -> x509.CertificateSigningRequest:
    return deserialize_csr(Path(path).read_bytes())


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def extract_san_uris(cert: x509.Certificate | x509.CertificateSigningRequest) -> list[str]:
    """Return URI entries of the subjectAltName extension, or [] if absent."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return []
    return san.get_values_for_type(x509.UniformResourceIdentifier)


def is_self_signed(cert: x509.Certificate) -> bool:
    """True if subject equals issuer and the certificate verifies against itself."""
    if cert.subject != cert.issuer:
        return False
    try:
        cert.verify_directly_issued_by(cert)
    except (InvalidSignature, ValueError, TypeError):
        return False
    return True


def extract_certificate_metadata(
    cert: x509.Certificate, role: CertificateRole | None = None
) -> CertificateMetadata:
    """Extract certificate metadata for JSON serialization.

    Args:
        cert: X.509 certificate to extract metadata from
        role: Optional role recorded alongside the certificate

    Returns:
        CertificateMetadata with serial, subject, issuer, SAN URIs and timestamps.
        role included only when provided (NotRequired field).
    """
    metadata = CertificateMetadata(
        serialNumber=get_certificate_serial_hex(cert),
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        identityUris=extract_san_uris(cert),
        notBefore=cert.not_valid_before_utc.isoformat(),
        expiry=cert.not_valid_after_utc.isoformat(),
        issuedAt=datetime.now(UTC).isoformat(),
    )

    if role is not None:
        metadata["role"] = str(role)

    return metadata
