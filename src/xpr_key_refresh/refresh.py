"""Permission key refresh pipeline."""

from __future__ import annotations

import shlex
import sys
from dataclasses import dataclass
from typing import Pattern, Sequence

from xpr_key_refresh.authority import (
    DEFAULT_PERMISSION,
    build_authorization,
    build_updateauth_payload,
)
from xpr_key_refresh.errors import InvocationError
from xpr_key_refresh.invoker import ProtonClient, UpdateAuthClientProtocol
from xpr_key_refresh.txparse import (
    DEFAULT_EXPLORER_BASE,
    TRANSACTION_ID_PATTERNS,
    extract_transaction_id,
    transaction_link,
)


@dataclass(frozen=True)
class InvocationResult:
    success: bool
    account: str | None = None
    permission: str | None = None
    transaction_id: str | None = None
    transaction_link: str | None = None
    new_public_key: str | None = None
    output: str | None = None
    error: str | None = None
    stderr: str | None = None

    def to_public_dict(self) -> dict:
        if not self.success:
            payload: dict = {"success": False, "error": self.error}
            if self.stderr is not None:
                payload["stderr"] = self.stderr
            return payload
        return {
            "success": True,
            "account": self.account,
            "permission": self.permission,
            "transactionId": self.transaction_id,
            "transactionLink": self.transaction_link,
            "newPublicKey": self.new_public_key,
        }


def update_auth(
    account: str,
    new_public_key: str,
    permission: str = DEFAULT_PERMISSION,
    *,
    client: UpdateAuthClientProtocol | None = None,
    explorer_base: str = DEFAULT_EXPLORER_BASE,
    patterns: Sequence[Pattern[str]] = TRANSACTION_ID_PATTERNS,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> InvocationResult:
    """Replace the single key on ``account@permission`` with ``new_public_key``.

    Runs one updateauth transaction through the external client. A client
    failure is returned as an unsuccessful result rather than raised. A
    transaction id that cannot be found in the output leaves ``transaction_id``
    as None but still counts as success, since the client reported success.
    """
    client = client or ProtonClient()
    print(f"[INFO] Updating auth for {account}@{permission}...", file=stdout)
    print(f"[INFO] New public key: {new_public_key}", file=stdout)

    payload = build_updateauth_payload(account, new_public_key, permission)
    authorization = build_authorization(account, permission)
    command = client.command(payload, authorization)

    print("[INFO] Executing updateauth transaction...", file=stdout)
    print(f"[DEBUG] Command: {shlex.join(command)}", file=stdout)

    try:
        result = client.run(command)
    except InvocationError as exc:
        return InvocationResult(success=False, error=str(exc), stderr=exc.stderr)

    if result.stderr:
        print(f"[WARNING] {result.stderr}", file=stderr)
    print(f"[INFO] Output: {result.stdout}", file=stdout)

    transaction_id = extract_transaction_id(result.stdout, patterns)
    return InvocationResult(
        success=True,
        account=account,
        permission=permission,
        transaction_id=transaction_id,
        transaction_link=transaction_link(transaction_id, explorer_base),
        new_public_key=new_public_key,
        output=result.stdout,
    )
