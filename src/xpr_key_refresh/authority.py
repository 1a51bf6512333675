"""updateauth payload builders."""

from __future__ import annotations

from typing import Literal

Permission = Literal["active", "owner"]

KNOWN_PERMISSIONS: tuple[Permission, ...] = ("active", "owner")
DEFAULT_PERMISSION: Permission = "active"


def is_known_permission(value: str) -> bool:
    return value in KNOWN_PERMISSIONS


def parent_permission(permission: str) -> str:
    # owner is the root of the permission tree
    return "" if permission == "owner" else "owner"


def authorization_permission(permission: str) -> str:
    return "owner" if permission == "owner" else "active"


def build_authorization(account: str, permission: str) -> str:
    return f"{account}@{authorization_permission(permission)}"


def build_updateauth_payload(account: str, new_public_key: str, permission: str) -> dict:
    """Return the eosio::updateauth action data for a single-key authority.

    The authority is always threshold 1 with one key of weight 1 and no
    account or wait entries.
    """
    return {
        "account": account,
        "permission": permission,
        "parent": parent_permission(permission),
        "auth": {
            "threshold": 1,
            "keys": [{"key": new_public_key, "weight": 1}],
            "accounts": [],
            "waits": [],
        },
    }
