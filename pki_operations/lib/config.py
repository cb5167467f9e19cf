"""Toolkit and PKI configuration dataclasses."""

import os
from dataclasses import dataclass
from pathlib import Path

# Minimal toolkit config: empty DN section (subjects come from -subj) and a
# CA extension section applied by `req -x509`.
DEFAULT_OPENSSL_CONFIG = """\
[ req ]
distinguished_name = req_distinguished_name
x509_extensions = v3_ca

[ req_distinguished_name ]

[ v3_ca ]
basicConstraints = critical, CA:TRUE
keyUsage = critical, keyCertSign, cRLSign, digitalSignature
subjectKeyIdentifier = hash
authorityKeyIdentifier = keyid:always, issuer
"""


@dataclass
class ToolkitConfig:
    """How the external PKI toolkit is invoked."""

    openssl_bin: str = "openssl"
    server_port: int = 4433
    tls_version_flag: str = "-tls1_3"
    verify_depth: int = 1
    temp_dir: Path | None = None
    serial_path: Path | None = None

    @classmethod
    def from_env(cls) -> "ToolkitConfig":
        """Build config from PKI_OPENSSL_BIN, PKI_SERVER_PORT and PKI_TEMP_DIR."""
        temp_dir = os.environ.get("PKI_TEMP_DIR")
        return cls(
            openssl_bin=os.environ.get("PKI_OPENSSL_BIN", cls.openssl_bin),
            server_port=int(os.environ.get("PKI_SERVER_PORT", cls.server_port)),
            temp_dir=Path(temp_dir) if temp_dir else None,
        )


@dataclass
class PKIConfig:
    """Identity naming and validity defaults for issued certificates."""

    trust_domain: str = "example"
    root_algorithm: str = "ed25519"
    leaf_algorithm: str = "rsa:2048"
    root_validity_days: int = 3650
    leaf_validity_days: int = 365

    def identity_uri(self, name: str) -> str:
        """Return SPIFFE ID for a workload name, e.g. spiffe://example/leaf."""
        return f"spiffe://{self.trust_domain}/{name}"

    def subject(self, name: str) -> str:
        return f"/CN={name}"


def write_openssl_config(path: Path) -> Path:
    """Write the default toolkit configuration file and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_OPENSSL_CONFIG)
    return path
