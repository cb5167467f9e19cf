"""Certificate chain verification."""

from pathlib import Path

from .invoker import CryptoToolInvoker, OpenSSLInvoker


class CertificateValidator:
    """Verifies that a certificate chains to a trusted CA certificate."""

    def __init__(self, invoker: CryptoToolInvoker | None = None) -> None:
        self.invoker = invoker or OpenSSLInvoker()

    def validate_certificate(self, cert_path: Path, ca_cert_path: Path) -> None:
        """Return normally only when the toolkit reports the chain as valid.

        Raises:
            ExternalToolError: With the toolkit diagnostic (unknown issuer,
                expired, signature mismatch, ...) in its output
        """
        self.invoker.validate_certificate(cert_path, ca_cert_path)
