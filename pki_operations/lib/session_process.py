"""Server and client TLS session start-up."""

from pathlib import Path

from .invoker import CryptoToolInvoker, OpenSSLInvoker
from .tls_session import TLSSession


class TLSSessionProcess:
    """Starts mutually authenticated TLS peers and hands back live sessions.

    Neither operation waits for the handshake or for process exit.
    """

    def __init__(self, invoker: CryptoToolInvoker | None = None) -> None:
        self.invoker = invoker or OpenSSLInvoker()

    def start_server(self, cert_path: Path, key_path: Path, ca_path: Path) -> TLSSession:
        """Start a listening peer on the configured port, requiring client certificates.

        Raises:
            ExternalToolError: If pipes cannot be created or the peer cannot start
        """
        return self.invoker.start_server(cert_path, key_path, ca_path)

    def start_client(
        self,
        address: str,
        cert_path: Path,
        key_path: Path,
        ca_cert_path: Path,
    ) -> TLSSession:
        """Start a peer connecting to address (host:port), verifying it against ca_cert_path.

        Raises:
            ExternalToolError: If pipes cannot be created or the peer cannot start
        """
        return self.invoker.start_client(address, cert_path, key_path, ca_cert_path)
