"""Subprocess wrapper around the proton command-line client."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from typing import Protocol

from xpr_key_refresh.errors import (
    ClientNotFoundError,
    InvocationError,
    InvocationTimeoutError,
)

DEFAULT_CLIENT_BINARY = "proton"


@dataclass(frozen=True)
class ClientOutput:
    stdout: str
    stderr: str


class UpdateAuthClientProtocol(Protocol):
    def command(self, payload: dict, authorization: str) -> list[str]: ...

    def run(self, command: list[str]) -> ClientOutput: ...


def serialize_payload(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def build_updateauth_command(
    payload: dict, authorization: str, *, client_binary: str = DEFAULT_CLIENT_BINARY
) -> list[str]:
    return [
        client_binary,
        "action",
        "eosio",
        "updateauth",
        serialize_payload(payload),
        authorization,
    ]


@dataclass
class ProtonClient:
    """Runs `proton action eosio updateauth` as a child process.

    Arguments are passed as a vector, never through a shell, so account names
    and keys reach the client verbatim. The call blocks until the client
    exits, or until ``timeout`` seconds when one is set. Nothing is retried.
    """

    binary: str = DEFAULT_CLIENT_BINARY
    timeout: float | None = None

    def command(self, payload: dict, authorization: str) -> list[str]:
        return build_updateauth_command(payload, authorization, client_binary=self.binary)

    def run(self, command: list[str]) -> ClientOutput:
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise ClientNotFoundError(f"{self.binary} not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise InvocationTimeoutError(
                f"{self.binary} did not finish within {self.timeout} seconds",
                stderr=_as_text(exc.stderr),
            ) from exc
        except OSError as exc:
            raise ClientNotFoundError(f"failed to start {self.binary}: {exc}") from exc

        if result.returncode != 0:
            raise InvocationError(
                f"Command failed with exit code {result.returncode}: {' '.join(command[:4])}",
                stderr=result.stderr or None,
                returncode=result.returncode,
            )
        return ClientOutput(stdout=result.stdout or "", stderr=result.stderr or "")

    def updateauth(self, payload: dict, authorization: str) -> ClientOutput:
        return self.run(self.command(payload, authorization))


def _as_text(value: str | bytes | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace") or None
    return value or None
