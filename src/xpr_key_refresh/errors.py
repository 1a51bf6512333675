"""Key refresh error types."""

from __future__ import annotations


class KeyRefreshError(RuntimeError):
    """Base key refresh error."""


class InvocationError(KeyRefreshError):
    """External client exited unsuccessfully."""

    def __init__(
        self,
        message: str,
        *,
        stderr: str | None = None,
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class ClientNotFoundError(InvocationError):
    """External client could not be spawned."""


class InvocationTimeoutError(InvocationError):
    """External client did not finish within the configured timeout."""
