#!/usr/bin/env python3
"""Provision a workload identity certificate signed by the root CA."""

import argparse
import sys
from pathlib import Path

from pki_operations.lib.config import PKIConfig, ToolkitConfig
from pki_operations.lib.invoker import OpenSSLInvoker
from pki_operations.lib.logging_config import LOGGER
from pki_operations.lib.pki_manager import PKIManager


def main() -> int:
    """Provision leaf certificate for the given workload name.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Provision workload identity certificate")
    parser.add_argument(
        "--name",
        required=True,
        help="Workload name (used as CN and SPIFFE ID path)",
    )
    parser.add_argument(
        "--ca-dir",
        type=Path,
        required=True,
        help="CA base directory containing root-ca/ subdirectory",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("pki-operations/output/identities"),
        help="Output directory for identity artifacts (default: pki-operations/output/identities)",
    )
    parser.add_argument("--trust-domain", default="example", help="SPIFFE trust domain")
    parser.add_argument("--algorithm", default="rsa:2048", help="Leaf key algorithm")
    parser.add_argument("--days", type=int, default=365, help="Leaf validity in days")
    args = parser.parse_args()

    try:
        config = PKIConfig(
            trust_domain=args.trust_domain,
            leaf_algorithm=args.algorithm,
            leaf_validity_days=args.days,
        )
        manager = PKIManager(config, OpenSSLInvoker(ToolkitConfig.from_env()))

        LOGGER.info("Provisioning identity for: %s", args.name)
        result = manager.provision_identity(
            name=args.name,
            ca_base_dir=args.ca_dir,
            output_dir=args.output_dir,
        )

        LOGGER.info("Identity certificate created:")
        LOGGER.info("  Key: %s", result.key_path)
        LOGGER.info("  Cert: %s", result.cert_path)
        LOGGER.info("  SPIFFE ID: %s", result.identity_uri)
        LOGGER.info("  Serial: %s", result.serial_number)
        LOGGER.info("  Metadata: %s", result.metadata_path)
        return 0

    except FileNotFoundError as e:
        LOGGER.error("CA file not found: %s", e)
        return 1
    except Exception as e:
        LOGGER.error("Identity provisioning failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
