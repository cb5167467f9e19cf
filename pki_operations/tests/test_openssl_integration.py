"""End-to-end lifecycle and session tests against the real openssl binary."""

from pathlib import Path

import pytest

from pki_operations.lib.cert_utils import extract_san_uris, is_self_signed, load_certificate
from pki_operations.lib.certificate_authority import CertificateAuthority
from pki_operations.lib.certificate_requestor import CertificateRequestor
from pki_operations.lib.certificate_validator import CertificateValidator
from pki_operations.lib.config import ToolkitConfig
from pki_operations.lib.errors import ExternalToolError
from pki_operations.lib.invoker import OpenSSLInvoker
from pki_operations.lib.key_generator import KeyMaterialGenerator
from pki_operations.lib.session_process import TLSSessionProcess

pytestmark = pytest.mark.openssl


class TestRootCertificate:
    """Tests for self-signed roots."""

    def test_root_validates_against_itself(
        self, invoker: OpenSSLInvoker, root_ca: tuple[Path, Path]
    ) -> None:
        """validate_certificate(R, R) succeeds for a self-signed root."""
        _, root_cert = root_ca
        CertificateValidator(invoker).validate_certificate(root_cert, root_cert)

    def test_root_is_self_signed_with_san(self, root_ca: tuple[Path, Path]) -> None:
        """Root subject equals issuer and carries its URI SAN."""
        cert = load_certificate(root_ca[1])

        assert is_self_signed(cert)
        assert extract_san_uris(cert) == ["spiffe://example/root"]

    def test_unsupported_algorithm_fails(self, invoker: OpenSSLInvoker, temp_output_dir: Path) -> None:
        """Unknown algorithm names fail with the toolkit's diagnostic."""
        with pytest.raises(ExternalToolError) as exc_info:
            KeyMaterialGenerator(invoker).generate_private_key(
                "not-a-real-algorithm", temp_output_dir / "bad.key"
            )

        assert exc_info.value.output


class TestLeafChain:
    """Tests for leaf certificates signed by a root."""

    def test_leaf_validates_against_root(
        self,
        invoker: OpenSSLInvoker,
        root_ca: tuple[Path, Path],
        leaf_cert: tuple[Path, Path],
    ) -> None:
        """Leaf chains to the root that signed it."""
        CertificateValidator(invoker).validate_certificate(leaf_cert[1], root_ca[1])

    def test_leaf_san_matches_identity(self, leaf_cert: tuple[Path, Path]) -> None:
        """Leaf SAN URI equals the identity asserted at signing."""
        assert extract_san_uris(load_certificate(leaf_cert[1])) == ["spiffe://example/leaf"]

    def test_leaf_rejected_by_unrelated_root(
        self,
        invoker: OpenSSLInvoker,
        temp_output_dir: Path,
        openssl_config: Path,
        leaf_cert: tuple[Path, Path],
    ) -> None:
        """Validating against a different root raises ExternalToolError."""
        other_key = temp_output_dir / "other.key"
        other_cert = temp_output_dir / "other.crt"
        invoker.generate_private_key("ed25519", other_key)
        invoker.generate_root_certificate(
            other_key, other_cert, "/CN=other", "spiffe://other/root", openssl_config, 30
        )

        with pytest.raises(ExternalToolError, match="Failed to validate certificate"):
            CertificateValidator(invoker).validate_certificate(leaf_cert[1], other_cert)

    def test_serial_file_created_next_to_ca(
        self, root_ca: tuple[Path, Path], leaf_cert: tuple[Path, Path]
    ) -> None:
        """First signing creates the CA serial file."""
        assert root_ca[1].with_suffix(".srl").exists()


class TestSigningCleanup:
    """Extension files never outlive a signing call."""

    def test_failed_signing_leaves_temp_dir_unchanged(
        self,
        invoker: OpenSSLInvoker,
        root_ca: tuple[Path, Path],
        scratch_dir: Path,
        temp_output_dir: Path,
    ) -> None:
        """Signing a nonexistent CSR fails and leaves no extension file behind."""
        root_key, root_cert = root_ca
        before = len(list(scratch_dir.iterdir()))

        for _ in range(3):
            with pytest.raises(ExternalToolError, match="Failed to sign certificate"):
                CertificateAuthority(invoker).sign_certificate(
                    temp_output_dir / "does-not-exist.csr",
                    root_cert,
                    root_key,
                    "spiffe://example/leaf",
                    temp_output_dir / "never.crt",
                    365,
                )

        assert len(list(scratch_dir.iterdir())) == before


def test_full_lifecycle_scenario(invoker: OpenSSLInvoker, temp_output_dir: Path, openssl_config: Path) -> None:
    """Keygen, root, CSR, signing and validation all succeed in sequence."""
    root_key = temp_output_dir / "root.key"
    root_crt = temp_output_dir / "root.crt"
    leaf_key = temp_output_dir / "leaf.key"
    leaf_csr = temp_output_dir / "leaf.csr"
    leaf_crt = temp_output_dir / "leaf.crt"

    key = KeyMaterialGenerator(invoker).generate_private_key("ed25519", root_key)
    assert key.path.exists()

    authority = CertificateAuthority(invoker)
    authority.generate_root_certificate(
        root_key, root_crt, "/CN=root", "spiffe://example/root", openssl_config, 3650
    )
    csr = CertificateRequestor(invoker).generate_csr(
        "rsa:2048", leaf_key, leaf_csr, "/CN=leaf", "spiffe://example/leaf", openssl_config
    )
    assert csr.path.exists()
    assert csr.key.path.exists()

    leaf = authority.sign_certificate(
        leaf_csr, root_crt, root_key, "spiffe://example/leaf", leaf_crt, 365
    )
    CertificateValidator(invoker).validate_certificate(leaf.path, root_crt)


def test_server_and_client_sessions(
    temp_output_dir: Path,
    scratch_dir: Path,
    free_port: int,
    root_ca: tuple[Path, Path],
    leaf_cert: tuple[Path, Path],
) -> None:
    """Starting a server then a client yields two live sessions and four streams."""
    _, root_cert = root_ca
    leaf_key, leaf_crt = leaf_cert
    sessions = TLSSessionProcess(
        OpenSSLInvoker(ToolkitConfig(temp_dir=scratch_dir, server_port=free_port))
    )

    server = sessions.start_server(leaf_crt, leaf_key, root_cert)
    try:
        client = sessions.start_client(f"127.0.0.1:{free_port}", leaf_crt, leaf_key, root_cert)
        try:
            for session in (server, client):
                assert session.process is not None
                assert session.stdin is not None
                assert session.stdout is not None
        finally:
            client.close()
    finally:
        server.close()

    assert server.returncode is not None
