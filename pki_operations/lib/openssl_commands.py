"""Argument builders for openssl subcommands."""

from pathlib import Path

from .config import ToolkitConfig

PathLike = str | Path


class OpenSSLCommands:
    """Builds openssl argument vectors for each lifecycle and session operation."""

    def __init__(self, config: ToolkitConfig | None = None) -> None:
        self.config = config or ToolkitConfig()

    def generate_private_key(self, algorithm: str, output_path: PathLike) -> list[str]:
        """Build `genpkey` command. The algorithm name is passed through untouched."""
        return [
            self.config.openssl_bin,
            "genpkey",
            "-algorithm", algorithm,
            "-out", str(output_path),
        ]

    def generate_root_certificate(
        self,
        key_path: PathLike,
        output_path: PathLike,
        subject: str,
        identity_uri: str,
        config_path: PathLike,
        validity_days: int,
    ) -> list[str]:
        """Build self-signed `req -x509` command.

        The identity is asserted as given in the subject and again as a
        URI subjectAltName; neither is derived from the other.
        """
        return [
            self.config.openssl_bin,
            "req",
            "-nodes",
            "-new",
            "-x509",
            "-key", str(key_path),
            "-out", str(output_path),
            "-days", str(validity_days),
            "-subj", subject,
            "-addext", subject_alt_name(identity_uri),
            "-config", str(config_path),
        ]

    def generate_csr(
        self,
        algorithm: str,
        key_output_path: PathLike,
        csr_output_path: PathLike,
        subject: str,
        config_path: PathLike,
    ) -> list[str]:
        """Build `req -newkey` command producing a fresh key and its CSR."""
        return [
            self.config.openssl_bin,
            "req",
            "-nodes",
            "-new",
            "-newkey", algorithm,
            "-keyout", str(key_output_path),
            "-out", str(csr_output_path),
            "-subj", subject,
            "-config", str(config_path),
        ]

    def sign_certificate(
        self,
        csr_path: PathLike,
        ca_cert_path: PathLike,
        ca_key_path: PathLike,
        extension_path: PathLike,
        serial_path: PathLike,
        output_path: PathLike,
        validity_days: int,
    ) -> list[str]:
        """Build `x509 -req` signing command, creating the CA serial file on first use."""
        return [
            self.config.openssl_bin,
            "x509",
            "-req",
            "-extfile", str(extension_path),
            "-in", str(csr_path),
            "-CA", str(ca_cert_path),
            "-CAkey", str(ca_key_path),
            "-CAcreateserial",
            "-CAserial", str(serial_path),
            "-out", str(output_path),
            "-days", str(validity_days),
        ]

    def validate_certificate(self, cert_path: PathLike, ca_cert_path: PathLike) -> list[str]:
        return [
            self.config.openssl_bin,
            "verify",
            "-CAfile", str(ca_cert_path),
            str(cert_path),
        ]

    def start_server(self, cert_path: PathLike, key_path: PathLike, ca_path: PathLike) -> list[str]:
        """Build `s_server` command requiring and verifying a client certificate."""
        return [
            self.config.openssl_bin,
            "s_server",
            "-accept", str(self.config.server_port),
            "-state",
            "-cert", str(cert_path),
            "-key", str(key_path),
            self.config.tls_version_flag,
            "-Verify", str(self.config.verify_depth),
            "-CAfile", str(ca_path),
            "-www",
        ]

    def start_client(
        self,
        address: str,
        cert_path: PathLike,
        key_path: PathLike,
        ca_cert_path: PathLike,
    ) -> list[str]:
        return [
            self.config.openssl_bin,
            "s_client",
            "-connect", address,
            "-state",
            "-cert", str(cert_path),
            "-key", str(key_path),
            self.config.tls_version_flag,
            "-CAfile", str(ca_cert_path),
        ]


def subject_alt_name(identity_uri: str) -> str:
    """Return the URI subjectAltName extension line for an identity."""
    return f"subjectAltName=URI:{identity_uri}"
