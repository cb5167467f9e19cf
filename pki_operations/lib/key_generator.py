"""Private key generation through the crypto toolkit."""

from pathlib import Path

from .invoker import CryptoToolInvoker, OpenSSLInvoker
from .models import KeyPair


class KeyMaterialGenerator:
    """Produces key pairs on disk for a named algorithm."""

    def __init__(self, invoker: CryptoToolInvoker | None = None) -> None:
        self.invoker = invoker or OpenSSLInvoker()

    def generate_private_key(self, algorithm: str, output_path: Path) -> KeyPair:
        """Generate a private key and write it to output_path.

        The algorithm identifier (e.g. "ed25519", "rsa", "dilithium3") is not
        checked locally; unsupported names fail in the toolkit.

        Raises:
            ExternalToolError: If the toolkit rejects the algorithm or cannot write the file
        """
        self.invoker.generate_private_key(algorithm, output_path)
        return KeyPair(algorithm=algorithm, path=Path(output_path))
