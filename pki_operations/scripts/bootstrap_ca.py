#!/usr/bin/env python3
"""Bootstrap a SPIFFE trust domain by generating its root CA."""

import argparse
import sys
from pathlib import Path

from pki_operations.lib.config import PKIConfig, ToolkitConfig
from pki_operations.lib.errors import ExternalToolError
from pki_operations.lib.invoker import OpenSSLInvoker
from pki_operations.lib.logging_config import LOGGER
from pki_operations.lib.pki_manager import PKIManager


def main() -> int:
    """Generate root key and self-signed root certificate.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Bootstrap root CA")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("pki-operations/output"),
        help="Output directory for CA artifacts (default: pki-operations/output)",
    )
    parser.add_argument("--trust-domain", default="example", help="SPIFFE trust domain")
    parser.add_argument("--algorithm", default="ed25519", help="Root key algorithm")
    parser.add_argument("--days", type=int, default=3650, help="Root validity in days")
    args = parser.parse_args()

    try:
        config = PKIConfig(
            trust_domain=args.trust_domain,
            root_algorithm=args.algorithm,
            root_validity_days=args.days,
        )
        manager = PKIManager(config, OpenSSLInvoker(ToolkitConfig.from_env()))

        LOGGER.info("Bootstrapping root CA for trust domain %s", args.trust_domain)
        result = manager.bootstrap_root(args.output_dir)

        LOGGER.info("Root CA created:")
        LOGGER.info("  Key: %s", result.root_key_path)
        LOGGER.info("  Cert: %s", result.root_cert_path)
        LOGGER.info("  SPIFFE ID: %s", result.identity_uri)
        LOGGER.info("  Serial: %s", result.root_serial)

        LOGGER.info("Bootstrap complete. Next: run provision_identity.py")
        return 0

    except ExternalToolError as e:
        LOGGER.error("openssl failed: %s", e)
        return 1
    except Exception as e:
        LOGGER.error("Bootstrap failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
