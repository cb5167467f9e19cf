#!/usr/bin/env python3
"""Verify a certificate against a CA certificate."""

import argparse
import sys
from pathlib import Path

from pki_operations.lib.cert_utils import extract_san_uris, load_certificate
from pki_operations.lib.certificate_validator import CertificateValidator
from pki_operations.lib.config import ToolkitConfig
from pki_operations.lib.errors import ExternalToolError
from pki_operations.lib.invoker import OpenSSLInvoker
from pki_operations.lib.logging_config import LOGGER


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate certificate chain")
    parser.add_argument("--cert", type=Path, required=True, help="Certificate to verify")
    parser.add_argument("--ca-cert", type=Path, required=True, help="Trusted CA certificate")
    parser.add_argument("--expect-uri", help="SPIFFE ID the certificate must carry")
    args = parser.parse_args()

    validator = CertificateValidator(OpenSSLInvoker(ToolkitConfig.from_env()))
    try:
        validator.validate_certificate(args.cert, args.ca_cert)
    except ExternalToolError as e:
        LOGGER.error("Validation failed: %s", e.output.strip() or e.process_error)
        return 1

    if args.expect_uri:
        uris = extract_san_uris(load_certificate(args.cert))
        if args.expect_uri not in uris:
            LOGGER.error("Certificate URIs %s do not include %s", uris, args.expect_uri)
            return 1

    LOGGER.info("Certificate %s is valid", args.cert)
    return 0


if __name__ == "__main__":
    sys.exit(main())
