"""Test fixtures for pki_operations tests."""

import shutil
import socket
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pki_operations.lib.config import PKIConfig, ToolkitConfig, write_openssl_config
from pki_operations.lib.invoker import OpenSSLInvoker
from pki_operations.lib.process_runner import ProcessRunner

HAS_OPENSSL = shutil.which("openssl") is not None


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip tests marked `openssl` when the binary is not on PATH."""
    if item.get_closest_marker("openssl") and not HAS_OPENSSL:
        pytest.skip("openssl binary not found on PATH")


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Return temporary directory for test output artifacts."""
    return tmp_path


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Return an empty directory used as the extension file temp dir."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def pki_config() -> PKIConfig:
    """Return test PKI configuration with short validity periods."""
    return PKIConfig(
        trust_domain="example",
        root_algorithm="ed25519",
        leaf_algorithm="rsa:2048",
        root_validity_days=30,
        leaf_validity_days=7,
    )


@pytest.fixture
def openssl_config(temp_output_dir: Path) -> Path:
    """Write the default toolkit config file."""
    return write_openssl_config(temp_output_dir / "ossl.cnf")


@pytest.fixture
def mock_runner() -> MagicMock:
    """Return ProcessRunner mock that succeeds with empty output."""
    runner = MagicMock(spec=ProcessRunner)
    runner.run.return_value = ""
    return runner


@pytest.fixture
def mock_invoker(mock_runner: MagicMock, scratch_dir: Path) -> OpenSSLInvoker:
    """Return OpenSSLInvoker wired to the mocked runner."""
    return OpenSSLInvoker(ToolkitConfig(temp_dir=scratch_dir), runner=mock_runner)


@pytest.fixture
def invoker(scratch_dir: Path) -> OpenSSLInvoker:
    """Return OpenSSLInvoker running the real toolkit."""
    return OpenSSLInvoker(ToolkitConfig(temp_dir=scratch_dir))


@pytest.fixture
def free_port() -> int:
    """Return a TCP port that was free at fixture time."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def root_ca(invoker: OpenSSLInvoker, temp_output_dir: Path, openssl_config: Path) -> tuple[Path, Path]:
    """Generate ed25519 root key and self-signed root certificate on disk.

    Returns:
        Tuple of (root_key_path, root_cert_path)
    """
    key_path = temp_output_dir / "root.key"
    cert_path = temp_output_dir / "root.crt"
    invoker.generate_private_key("ed25519", key_path)
    invoker.generate_root_certificate(
        key_path, cert_path, "/CN=root", "spiffe://example/root", openssl_config, 30
    )
    return key_path, cert_path


@pytest.fixture
def leaf_cert(
    invoker: OpenSSLInvoker,
    temp_output_dir: Path,
    openssl_config: Path,
    root_ca: tuple[Path, Path],
) -> tuple[Path, Path]:
    """Generate RSA leaf key and certificate signed by the root.

    Returns:
        Tuple of (leaf_key_path, leaf_cert_path)
    """
    root_key, root_cert = root_ca
    key_path = temp_output_dir / "leaf.key"
    csr_path = temp_output_dir / "leaf.csr"
    cert_path = temp_output_dir / "leaf.crt"
    invoker.generate_csr(
        "rsa:2048", key_path, csr_path, "/CN=leaf", "spiffe://example/leaf", openssl_config
    )
    invoker.sign_certificate(
        csr_path, root_cert, root_key, "spiffe://example/leaf", cert_path, 7
    )
    return key_path, cert_path
