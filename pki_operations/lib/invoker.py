"""Crypto toolkit capability interface and its openssl subprocess implementation."""

import os
import tempfile
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from .config import ToolkitConfig
from .errors import ExternalToolError
from .logging_config import LOGGER
from .openssl_commands import OpenSSLCommands, PathLike, subject_alt_name
from .process_runner import ProcessRunner
from .tls_session import TLSSession, spawn_session


class CryptoToolInvoker(Protocol):
    """One method per lifecycle and session operation.

    Lifecycle classes depend only on this protocol, so the execution
    mechanism can be swapped without touching them.
    """

    def generate_private_key(self, algorithm: str, output_path: PathLike) -> None: ...

    def generate_root_certificate(
        self,
        key_path: PathLike,
        output_path: PathLike,
        subject: str,
        identity_uri: str,
        config_path: PathLike,
        validity_days: int,
    ) -> None: ...

    def generate_csr(
        self,
        algorithm: str,
        key_output_path: PathLike,
        csr_output_path: PathLike,
        subject: str,
        identity_uri: str,
        config_path: PathLike,
    ) -> None: ...

    def sign_certificate(
        self,
        csr_path: PathLike,
        ca_cert_path: PathLike,
        ca_key_path: PathLike,
        identity_uri: str,
        output_path: PathLike,
        validity_days: int,
    ) -> None: ...

    def validate_certificate(self, cert_path: PathLike, ca_cert_path: PathLike) -> None: ...

    def start_server(self, cert_path: PathLike, key_path: PathLike, ca_path: PathLike) -> TLSSession: ...

    def start_client(
        self,
        address: str,
        cert_path: PathLike,
        key_path: PathLike,
        ca_cert_path: PathLike,
    ) -> TLSSession: ...


@contextmanager
def extension_file(identity_uri: str, directory: PathLike | None = None) -> Iterator[Path]:
    """Yield a temporary extension file asserting identity_uri as URI SAN.

    The file holds the single line ``subjectAltName=URI:<identity_uri>`` and
    is removed on every exit path. A failed removal is logged, not raised.

    Raises:
        ExternalToolError: If the file cannot be created, written or closed
    """
    try:
        fd, name = tempfile.mkstemp(prefix="extfile-", suffix=".conf", dir=directory)
    except OSError as e:
        raise ExternalToolError("failed to create temporary extension file", e) from e

    path = Path(name)
    try:
        try:
            handle = os.fdopen(fd, "w")
        except OSError as e:
            os.close(fd)
            raise ExternalToolError("failed to open temporary extension file", e) from e
        try:
            handle.write(subject_alt_name(identity_uri) + "\n")
        except OSError as e:
            handle.close()
            raise ExternalToolError("failed to write to temporary extension file", e) from e
        try:
            handle.close()
        except OSError as e:
            raise ExternalToolError("failed to close temporary extension file", e) from e

        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            LOGGER.warning("Could not remove extension file %s: %s", path, e)


# Entries live only while some signing holds the lock.
_serial_locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
_serial_locks_guard = threading.Lock()


def serial_lock(serial_path: Path) -> threading.Lock:
    """Return the process-wide lock guarding one CA serial file."""
    key = serial_path.resolve()
    with _serial_locks_guard:
        return _serial_locks.setdefault(key, threading.Lock())


class OpenSSLInvoker:
    """CryptoToolInvoker that spawns the openssl binary for every operation."""

    def __init__(
        self,
        config: ToolkitConfig | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.config = config or ToolkitConfig()
        self.commands = OpenSSLCommands(self.config)
        self.runner = runner or ProcessRunner()

    def generate_private_key(self, algorithm: str, output_path: PathLike) -> None:
        self.runner.run(
            self.commands.generate_private_key(algorithm, output_path),
            "Failed to generate private key",
        )

    def generate_root_certificate(
        self,
        key_path: PathLike,
        output_path: PathLike,
        subject: str,
        identity_uri: str,
        config_path: PathLike,
        validity_days: int,
    ) -> None:
        self.runner.run(
            self.commands.generate_root_certificate(
                key_path, output_path, subject, identity_uri, config_path, validity_days
            ),
            "Failed to generate root certificate",
        )

    def generate_csr(
        self,
        algorithm: str,
        key_output_path: PathLike,
        csr_output_path: PathLike,
        subject: str,
        identity_uri: str,
        config_path: PathLike,
    ) -> None:
        # The URI SAN is asserted at signing time, not in the request.
        self.runner.run(
            self.commands.generate_csr(
                algorithm, key_output_path, csr_output_path, subject, config_path
            ),
            "Failed to generate CSR",
        )

    def sign_certificate(
        self,
        csr_path: PathLike,
        ca_cert_path: PathLike,
        ca_key_path: PathLike,
        identity_uri: str,
        output_path: PathLike,
        validity_days: int,
    ) -> None:
        """Sign a CSR with the CA, asserting identity_uri through an extension file.

        Signings that share a serial file are serialised within this process.
        """
        serial_path = self.serial_path_for(ca_cert_path)
        with extension_file(identity_uri, self.config.temp_dir) as ext_path:
            command = self.commands.sign_certificate(
                csr_path,
                ca_cert_path,
                ca_key_path,
                ext_path,
                serial_path,
                output_path,
                validity_days,
            )
            with serial_lock(serial_path):
                self.runner.run(command, "Failed to sign certificate")

    def serial_path_for(self, ca_cert_path: PathLike) -> Path:
        """Return the CA serial file: configured path, else the CA cert with .srl suffix."""
        if self.config.serial_path is not None:
            return Path(self.config.serial_path)
        return Path(ca_cert_path).with_suffix(".srl")

    def validate_certificate(self, cert_path: PathLike, ca_cert_path: PathLike) -> None:
        self.runner.run(
            self.commands.validate_certificate(cert_path, ca_cert_path),
            "Failed to validate certificate",
        )

    def start_server(self, cert_path: PathLike, key_path: PathLike, ca_path: PathLike) -> TLSSession:
        return spawn_session(
            self.commands.start_server(cert_path, key_path, ca_path),
            "Failed to start TLS server",
        )

    def start_client(
        self,
        address: str,
        cert_path: PathLike,
        key_path: PathLike,
        ca_cert_path: PathLike,
    ) -> TLSSession:
        return spawn_session(
            self.commands.start_client(address, cert_path, key_path, ca_cert_path),
            "Failed to start TLS client",
        )
