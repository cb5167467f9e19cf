"""Root certificate creation and CSR signing."""

from pathlib import Path

from .invoker import CryptoToolInvoker, OpenSSLInvoker
from .models import Certificate, CertificateRole


class CertificateAuthority:
    """Creates self-signed roots and signs leaf CSRs against them."""

    def __init__(self, invoker: CryptoToolInvoker | None = None) -> None:
        self.invoker = invoker or OpenSSLInvoker()

    def generate_root_certificate(
        self,
        key_path: Path,
        output_path: Path,
        subject: str,
        identity_uri: str,
        config_path: Path,
        validity_days: int,
    ) -> Certificate:
        """Self-sign a root certificate with key_path.

        The identity is embedded twice: through the subject string as supplied
        and as a URI subjectAltName. Both must be given consistently.

        Args:
            key_path: Existing private key of the root
            output_path: Where the root certificate is written
            subject: Subject DN, e.g. "/CN=root"
            identity_uri: SPIFFE ID of the root, e.g. "spiffe://example/root"
            config_path: Toolkit configuration file
            validity_days: Validity period in days

        Returns:
            Root Certificate handle

        Raises:
            ExternalToolError: If the toolkit invocation fails
        """
        self.invoker.generate_root_certificate(
            key_path, output_path, subject, identity_uri, config_path, validity_days
        )
        return Certificate(
            path=Path(output_path),
            role=CertificateRole.ROOT,
            validity_days=validity_days,
            identity_uri=identity_uri,
        )

    def sign_certificate(
        self,
        csr_path: Path,
        ca_cert_path: Path,
        ca_key_path: Path,
        identity_uri: str,
        output_path: Path,
        validity_days: int,
    ) -> Certificate:
        """Issue a leaf certificate from a CSR, signed by the CA.

        The URI subjectAltName is re-asserted from identity_uri rather than
        copied from the CSR, so it must match the identity the CSR was made
        for. The CA serial file is created on first use.

        Args:
            csr_path: CSR to sign
            ca_cert_path: CA certificate (issuer)
            ca_key_path: CA private key
            identity_uri: SPIFFE ID written into the leaf SAN
            output_path: Where the leaf certificate is written
            validity_days: Validity period in days

        Returns:
            Leaf Certificate handle

        Raises:
            ExternalToolError: If the extension file cannot be prepared or signing fails
        """
        self.invoker.sign_certificate(
            csr_path, ca_cert_path, ca_key_path, identity_uri, output_path, validity_days
        )
        return Certificate(
            path=Path(output_path),
            role=CertificateRole.LEAF,
            validity_days=validity_days,
            identity_uri=identity_uri,
        )
