"""Automation bridge error classes.

Infrastructure failures of the script execution gateway, plus the
precondition failure raised by scripts that need a live window.
"""

from typing import Optional


class BridgeError(RuntimeError):
    """The interpreter exited non-zero or the script raised an untagged error."""

    def __init__(self, message: str, *, returncode: Optional[int] = None, stderr: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.returncode = returncode
        self.stderr = stderr


class BridgeTimeoutError(BridgeError):
    """The interpreter did not finish within the configured timeout."""

    def __init__(self, message: str, *, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout


class BridgeOutputError(BridgeError):
    """The interpreter produced output that is too large or not valid JSON."""

    pass


class PreconditionError(RuntimeError):
    """A script refused to run because the application is not in a usable state."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
