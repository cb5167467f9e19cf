"""Synchronous execution of external toolkit commands."""

import subprocess
from collections.abc import Sequence

from .errors import ExternalToolError
from .logging_config import LOGGER


class ProcessRunner:
    """Runs one toolkit command to completion and captures combined output."""

    def run(self, command: Sequence[str], operation: str) -> str:
        """Run command, blocking until it exits.

        Stderr is merged into stdout. The combined output of a successful run
        is logged at INFO and returned.

        Args:
            command: Program and arguments, e.g. ["openssl", "verify", ...]
            operation: Description used in logs and errors

        Returns:
            Combined stdout/stderr text

        Raises:
            ExternalToolError: On non-zero exit or if the command cannot start
        """
        command = [str(arg) for arg in command]
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise ExternalToolError(operation, e, e.output or "") from e
        except OSError as e:
            raise ExternalToolError(operation, e) from e

        LOGGER.info(
            "%s",
            result.stdout,
            extra={"operation": operation, "command": " ".join(command)},
        )
        return result.stdout
