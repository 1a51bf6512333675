"""Command-line interface for xpr-key-refresh."""

from __future__ import annotations

import argparse
import json
import re
import shlex
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from xpr_key_refresh.authority import (
    DEFAULT_PERMISSION,
    build_authorization,
    build_updateauth_payload,
    is_known_permission,
)
from xpr_key_refresh.cli.config import CLIConfig, ConfigError, load_cli_config, parse_timeout
from xpr_key_refresh.invoker import ProtonClient
from xpr_key_refresh.refresh import InvocationResult, update_auth

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

BANNER_WIDTH = 50

USAGE_TEXT = """\
Usage: xpr-key-refresh <account> <newPublicKey> [permission]

Parameters:
  account       - Proton account name
  newPublicKey  - New public key to set (PUB_K1_...)
  permission    - Permission to update: active or owner (default: active)

Note: Uses keys from "proton key:list" for signing
      Make sure you have the required key imported

Example:
  xpr-key-refresh dcdoit PUB_K1_6aEZ3qzrzG4xniJXTm79RUQfKYmFGsH2UfgbvMVBAeNZJJYTsu active
"""


class UsageError(ValueError):
    """Raised when command-line arguments are invalid."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


_SENSITIVE_FIELDS = (
    "private_key",
    "privatekey",
    "secret",
    "token",
    "password",
)


def _package_version() -> str:
    try:
        return pkg_version("xpr-key-refresh")
    except PackageNotFoundError:
        return "0.0.0+local"


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="xpr-key-refresh",
        description="Rotate the key of an XPR Network account permission via the proton CLI.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"xpr-key-refresh {_package_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.xpr_key_refresh/config.toml)",
    )
    parser.add_argument("--client", default=None, help="proton client executable override")
    parser.add_argument(
        "--timeout",
        default=None,
        help="Seconds to wait for the client before giving up (default: wait indefinitely)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the updateauth payload and command without running it",
    )
    parser.add_argument("account", nargs="?", default=None, help="Proton account name")
    parser.add_argument("new_public_key", nargs="?", default=None, help="New public key")
    parser.add_argument(
        "permission",
        nargs="?",
        default=None,
        help="Permission to update: active or owner (default: active)",
    )
    return parser


def _sanitize_error_text(value: str) -> str:
    redacted = value
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    redacted = re.sub(r"PVT_[A-Z0-9]+_\w+", "[REDACTED]", redacted)
    return redacted


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {_sanitize_error_text(message)}", file=stderr)
    return code


def _print_banner(stdout, title: str) -> None:
    print("=" * BANNER_WIDTH, file=stdout)
    print(f"  {title}", file=stdout)
    print("=" * BANNER_WIDTH, file=stdout)


def _resolve_config(args) -> CLIConfig:
    config = load_cli_config(args.config)
    client_binary = args.client.strip() if args.client else config.client_binary
    if not client_binary:
        raise ConfigError("--client must not be empty")
    timeout = (
        parse_timeout(args.timeout, "--timeout")
        if args.timeout is not None
        else config.timeout_seconds
    )
    return CLIConfig(
        client_binary=client_binary,
        explorer_base=config.explorer_base,
        timeout_seconds=timeout,
    )


def _run_dry_run(*, account: str, new_public_key: str, permission: str, client, stdout) -> int:
    payload = build_updateauth_payload(account, new_public_key, permission)
    command = client.command(payload, build_authorization(account, permission))
    print("[INFO] Dry run; the client will not be invoked.", file=stdout)
    print("Payload:", file=stdout)
    print(json.dumps(payload, indent=2), file=stdout)
    print(f"Command: {shlex.join(command)}", file=stdout)
    return EXIT_SUCCESS


def _report_success(result: InvocationResult, stdout) -> int:
    _print_banner(stdout, "SUCCESS")
    print("", file=stdout)
    print(f"Account: {result.account}@{result.permission}", file=stdout)
    print(f"New Public Key: {result.new_public_key}", file=stdout)
    if result.transaction_id:
        print(f"Transaction ID: {result.transaction_id}", file=stdout)
        print(f"Transaction Link: {result.transaction_link}", file=stdout)
    print("", file=stdout)
    print("JSON Output:", file=stdout)
    print(json.dumps(result.to_public_dict(), indent=2), file=stdout)
    print("", file=stdout)
    return EXIT_SUCCESS


def _report_failure(result: InvocationResult, stdout) -> int:
    error = _sanitize_error_text(result.error or "unknown error")
    details = _sanitize_error_text(result.stderr) if result.stderr else None

    _print_banner(stdout, "FAILED")
    print("", file=stdout)
    print(f"Error: {error}", file=stdout)
    if details:
        print(f"Details: {details}", file=stdout)
    print("", file=stdout)

    payload = result.to_public_dict()
    payload["error"] = error
    if details is not None:
        payload["stderr"] = details
    print("JSON Output:", file=stdout)
    print(json.dumps(payload, indent=2), file=stdout)
    print("", file=stdout)
    return EXIT_FAILURE


def main(argv: Sequence[str] | None = None, *, stdout=sys.stdout, stderr=sys.stderr) -> int:
    parser = _build_parser()
    try:
        args, extras = parser.parse_known_args(argv)
    except UsageError as exc:
        print(USAGE_TEXT, file=stdout)
        return _print_error(stderr, "usage error", str(exc), code=EXIT_FAILURE)

    unknown_options = [value for value in extras if value.startswith("-")]
    if unknown_options:
        print(USAGE_TEXT, file=stdout)
        return _print_error(
            stderr,
            "usage error",
            f"unrecognized arguments: {' '.join(unknown_options)}",
            code=EXIT_FAILURE,
        )

    if args.account is None or args.new_public_key is None:
        print(USAGE_TEXT, file=stdout)
        return EXIT_FAILURE

    if extras:
        print(f"[WARNING] ignoring extra arguments: {' '.join(extras)}", file=stderr)

    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_FAILURE)

    account = args.account
    new_public_key = args.new_public_key
    permission = args.permission or DEFAULT_PERMISSION
    if not is_known_permission(permission):
        print(
            f"[WARNING] permission {permission!r} is neither 'active' nor 'owner'; "
            "passing it to the client unchanged",
            file=stderr,
        )

    client = ProtonClient(binary=config.client_binary, timeout=config.timeout_seconds)

    if args.dry_run:
        return _run_dry_run(
            account=account,
            new_public_key=new_public_key,
            permission=permission,
            client=client,
            stdout=stdout,
        )

    print("", file=stdout)
    _print_banner(stdout, "XPR Key Refresh")
    print("", file=stdout)

    result = update_auth(
        account,
        new_public_key,
        permission,
        client=client,
        explorer_base=config.explorer_base,
        stdout=stdout,
        stderr=stderr,
    )

    print("", file=stdout)
    if result.success:
        return _report_success(result, stdout)
    return _report_failure(result, stdout)


if __name__ == "__main__":
    raise SystemExit(main())
