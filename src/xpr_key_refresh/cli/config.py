"""Configuration helpers for the xpr-key-refresh CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from xpr_key_refresh.invoker import DEFAULT_CLIENT_BINARY
from xpr_key_refresh.txparse import DEFAULT_EXPLORER_BASE

DEFAULT_CONFIG_PATH = Path.home() / ".xpr_key_refresh" / "config.toml"
CLIENT_BINARY_ENV_VAR = "XPR_KEY_REFRESH_CLIENT"
EXPLORER_BASE_ENV_VAR = "XPR_KEY_REFRESH_EXPLORER_BASE"


@dataclass(frozen=True)
class CLIConfig:
    client_binary: str = DEFAULT_CLIENT_BINARY
    explorer_base: str = DEFAULT_EXPLORER_BASE
    timeout_seconds: float | None = None


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def parse_timeout(value: Any, field_name: str = "timeout_seconds") -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a positive number")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be a positive number") from exc
    if timeout <= 0:
        raise ConfigError(f"{field_name} must be a positive number")
    return timeout


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    parsed: dict[str, Any] = _load_toml(config_path) if config_path.exists() else {}

    section = parsed.get("cli")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[cli] must be a table")

    env_client = os.getenv(CLIENT_BINARY_ENV_VAR)
    configured_client = str(source.get("client_binary", DEFAULT_CLIENT_BINARY)).strip()
    client_binary = env_client.strip() if env_client else configured_client
    if not client_binary:
        raise ConfigError("client_binary must not be empty")

    env_explorer = os.getenv(EXPLORER_BASE_ENV_VAR)
    configured_explorer = str(source.get("explorer_base", DEFAULT_EXPLORER_BASE)).strip()
    explorer_base = env_explorer.strip() if env_explorer else configured_explorer
    if not explorer_base:
        raise ConfigError("explorer_base must not be empty")

    return CLIConfig(
        client_binary=client_binary,
        explorer_base=explorer_base.rstrip("/"),
        timeout_seconds=parse_timeout(source.get("timeout_seconds")),
    )
