"""Leaf key and CSR generation."""

from pathlib import Path

from .invoker import CryptoToolInvoker, OpenSSLInvoker
from .models import CertificateSigningRequest, KeyPair


class CertificateRequestor:
    """Generates a fresh key pair and its CSR in a single toolkit invocation."""

    def __init__(self, invoker: CryptoToolInvoker | None = None) -> None:
        self.invoker = invoker or OpenSSLInvoker()

    def generate_csr(
        self,
        algorithm: str,
        key_output_path: Path,
        csr_output_path: Path,
        subject: str,
        identity_uri: str,
        config_path: Path,
    ) -> CertificateSigningRequest:
        """Generate key and CSR for a leaf identity.

        Args:
            algorithm: -newkey argument, e.g. "rsa:2048" or "ed25519"
            key_output_path: Where the new private key is written
            csr_output_path: Where the CSR is written
            subject: Subject DN, e.g. "/CN=leaf"
            identity_uri: SPIFFE ID the CSR is requested for; the signer must
                assert the same URI
            config_path: Toolkit configuration file

        Returns:
            CertificateSigningRequest referencing the written files

        Raises:
            ExternalToolError: If the toolkit invocation fails
        """
        self.invoker.generate_csr(
            algorithm, key_output_path, csr_output_path, subject, identity_uri, config_path
        )
        return CertificateSigningRequest(
            path=Path(csr_output_path),
            subject=subject,
            identity_uri=identity_uri,
            key=KeyPair(algorithm=algorithm, path=Path(key_output_path)),
        )
