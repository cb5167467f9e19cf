"""Error types for external toolkit invocations."""


class ExternalToolError(Exception):
    """Failure of an external toolkit invocation or of its local setup.

    Covers non-zero exits, binaries that could not be started, and local
    resource setup (temporary files, pipes). Callers that need to tell these
    apart must inspect ``process_error`` or ``output``.

    Attributes:
        operation: Human-readable description of the failed operation
        process_error: Underlying exception (CalledProcessError, OSError, ...)
        output: Combined stdout/stderr captured from the toolkit, if any
    """

    def __init__(self, operation: str, process_error: BaseException, output: str = "") -> None:
        self.operation = operation
        self.process_error = process_error
        self.output = output
        super().__init__(f"{operation}: {process_error}\n{output}")
