#!/usr/bin/env python3
"""Start a mutually authenticated TLS server or client and relay its I/O."""

import argparse
import sys
import threading
from pathlib import Path
from typing import BinaryIO

from pki_operations.lib.config import ToolkitConfig
from pki_operations.lib.errors import ExternalToolError
from pki_operations.lib.invoker import OpenSSLInvoker
from pki_operations.lib.logging_config import LOGGER
from pki_operations.lib.session_process import TLSSessionProcess
from pki_operations.lib.tls_session import TLSSession


def pump(source: BinaryIO, sink: BinaryIO, chunk_size: int = 4096) -> None:
    """Copy bytes from source to sink until EOF or a closed pipe."""
    try:
        while chunk := source.read(chunk_size):
            sink.write(chunk)
            sink.flush()
    except (BrokenPipeError, ValueError):
        # ValueError: the session closed the stream under us
        return


def forward_stdin(session: TLSSession) -> None:
    """Copy local stdin into the session, then close its write side."""
    try:
        pump(sys.stdin.buffer, session.stdin)
    finally:
        try:
            session.stdin.close()
        except (OSError, ValueError):
            # Peer already gone or stream closed by session.close()
            pass


def relay(session: TLSSession) -> int | None:
    """Relay local stdin to the session and session output to local stdout.

    Local EOF closes the session's stdin so the peer sees end of input.

    Returns:
        Peer exit code once its output is exhausted
    """
    writer = threading.Thread(target=forward_stdin, args=(session,), daemon=True)
    writer.start()
    pump(session.stdout, sys.stdout.buffer)
    return session.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Start TLS session peer")
    parser.add_argument("role", choices=["server", "client"])
    parser.add_argument("--cert", type=Path, required=True, help="Own certificate")
    parser.add_argument("--key", type=Path, required=True, help="Own private key")
    parser.add_argument("--ca-cert", type=Path, required=True, help="CA for peer verification")
    parser.add_argument(
        "--connect",
        default="127.0.0.1:4433",
        help="Server address for client role (default: 127.0.0.1:4433)",
    )
    args = parser.parse_args()

    sessions = TLSSessionProcess(OpenSSLInvoker(ToolkitConfig.from_env()))
    try:
        if args.role == "server":
            session = sessions.start_server(args.cert, args.key, args.ca_cert)
        else:
            session = sessions.start_client(args.connect, args.cert, args.key, args.ca_cert)
    except ExternalToolError as e:
        LOGGER.error("Could not start %s: %s", args.role, e)
        return 1

    try:
        returncode = relay(session)
    except KeyboardInterrupt:
        returncode = session.close()

    LOGGER.info("%s exited with %s", args.role, returncode)
    return 0 if returncode == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
