"""PKI manager running the certificate lifecycle end to end."""

import json
from pathlib import Path

from .cert_utils import extract_certificate_metadata, extract_san_uris, load_certificate
from .certificate_authority import CertificateAuthority
from .certificate_requestor import CertificateRequestor
from .certificate_validator import CertificateValidator
from .config import PKIConfig, write_openssl_config
from .invoker import CryptoToolInvoker, OpenSSLInvoker
from .key_generator import KeyMaterialGenerator
from .logging_config import LOGGER
from .models import BootstrapResult, CertificateRole, IdentityCertResult


class PKIManager:
    """Drives keygen, CSR, signing and validation for a SPIFFE trust domain."""

    def __init__(self, config: PKIConfig, invoker: CryptoToolInvoker | None = None) -> None:
        """Initialize PKI manager.

        Args:
            config: Trust domain, algorithms and validity periods
            invoker: Toolkit invoker shared by all lifecycle steps
        """
        self.config = config
        invoker = invoker or OpenSSLInvoker()
        self.key_generator = KeyMaterialGenerator(invoker)
        self.requestor = CertificateRequestor(invoker)
        self.authority = CertificateAuthority(invoker)
        self.validator = CertificateValidator(invoker)

    def bootstrap_root(self, output_base_dir: Path, name: str = "root") -> BootstrapResult:
        """Generate root key and self-signed root certificate.

        Writes to {output_base_dir}/root-ca/: RootCA.key, RootCA.pem,
        openssl.cnf and metadata.json.

        Args:
            output_base_dir: Base directory for output artifacts
            name: Workload name of the root, used for CN and SPIFFE ID

        Returns:
            BootstrapResult with file paths and serial number

        Raises:
            ExternalToolError: If any toolkit step fails
        """
        root_dir = output_base_dir / "root-ca"
        root_dir.mkdir(parents=True, exist_ok=True)

        config_path = write_openssl_config(root_dir / "openssl.cnf")
        identity_uri = self.config.identity_uri(name)

        key = self.key_generator.generate_private_key(
            self.config.root_algorithm, root_dir / "RootCA.key"
        )
        root = self.authority.generate_root_certificate(
            key_path=key.path,
            output_path=root_dir / "RootCA.pem",
            subject=self.config.subject(name),
            identity_uri=identity_uri,
            config_path=config_path,
            validity_days=self.config.root_validity_days,
        )
        self.validator.validate_certificate(root.path, root.path)

        metadata = extract_certificate_metadata(load_certificate(root.path), CertificateRole.ROOT)
        metadata_path = root_dir / "metadata.json"
        metadata_path.write_text(json.dumps(metadata, indent=2))

        return BootstrapResult(
            root_key_path=key.path,
            root_cert_path=root.path,
            metadata_path=metadata_path,
            root_serial=metadata["serialNumber"],
            identity_uri=identity_uri,
        )

    def provision_identity(
        self,
        name: str,
        ca_base_dir: Path,
        output_dir: Path,
    ) -> IdentityCertResult:
        """Issue a leaf certificate for a workload, signed by the root CA.

        Generates key and CSR, signs with the root asserting the workload's
        SPIFFE ID, verifies the chain and the SAN, then writes metadata.json.

        Args:
            name: Workload name (CN and last SPIFFE ID path segment)
            ca_base_dir: Base directory containing root-ca/
            output_dir: Output directory for leaf artifacts

        Returns:
            IdentityCertResult with file paths and serial number

        Raises:
            FileNotFoundError: If root CA key, cert or toolkit config not found
            ExternalToolError: If any toolkit step fails
            ValueError: If the issued SAN does not carry the requested identity
        """
        root_dir = ca_base_dir / "root-ca"
        root_key_path = root_dir / "RootCA.key"
        root_cert_path = root_dir / "RootCA.pem"
        config_path = root_dir / "openssl.cnf"

        if not root_key_path.exists():
            raise FileNotFoundError(f"root CA key not found: {root_key_path}")
        if not root_cert_path.exists():
            raise FileNotFoundError(f"root CA cert not found: {root_cert_path}")
        if not config_path.exists():
            raise FileNotFoundError(f"toolkit config not found: {config_path}")

        identity_dir = output_dir / name
        identity_dir.mkdir(parents=True, exist_ok=True)
        identity_uri = self.config.identity_uri(name)

        csr = self.requestor.generate_csr(
            algorithm=self.config.leaf_algorithm,
            key_output_path=identity_dir / "identity.key",
            csr_output_path=identity_dir / "identity.csr",
            subject=self.config.subject(name),
            identity_uri=identity_uri,
            config_path=config_path,
        )
        leaf = self.authority.sign_certificate(
            csr_path=csr.path,
            ca_cert_path=root_cert_path,
            ca_key_path=root_key_path,
            identity_uri=csr.identity_uri,
            output_path=identity_dir / "identity.pem",
            validity_days=self.config.leaf_validity_days,
        )
        self.validator.validate_certificate(leaf.path, root_cert_path)

        cert = load_certificate(leaf.path)
        if identity_uri not in extract_san_uris(cert):
            raise ValueError(f"issued certificate does not assert {identity_uri}")

        metadata = extract_certificate_metadata(cert, CertificateRole.LEAF)
        metadata_path = identity_dir / "metadata.json"
        metadata_path.write_text(json.dumps(metadata, indent=2))
        LOGGER.info("Issued %s with serial %s", identity_uri, metadata["serialNumber"])

        return IdentityCertResult(
            key_path=csr.key.path,
            cert_path=leaf.path,
            csr_path=csr.path,
            metadata_path=metadata_path,
            serial_number=metadata["serialNumber"],
            identity_uri=identity_uri,
        )
