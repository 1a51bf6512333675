"""xpr-key-refresh public surface."""

from xpr_key_refresh.authority import (
    DEFAULT_PERMISSION,
    KNOWN_PERMISSIONS,
    Permission,
    authorization_permission,
    build_authorization,
    build_updateauth_payload,
    parent_permission,
)
from xpr_key_refresh.errors import (
    ClientNotFoundError,
    InvocationError,
    InvocationTimeoutError,
    KeyRefreshError,
)
from xpr_key_refresh.invoker import ClientOutput, ProtonClient, build_updateauth_command
from xpr_key_refresh.refresh import InvocationResult, update_auth
from xpr_key_refresh.txparse import (
    TRANSACTION_ID_PATTERNS,
    extract_transaction_id,
    transaction_link,
)

__all__ = [
    "KeyRefreshError",
    "InvocationError",
    "ClientNotFoundError",
    "InvocationTimeoutError",
    "Permission",
    "KNOWN_PERMISSIONS",
    "DEFAULT_PERMISSION",
    "parent_permission",
    "authorization_permission",
    "build_authorization",
    "build_updateauth_payload",
    "ClientOutput",
    "ProtonClient",
    "build_updateauth_command",
    "TRANSACTION_ID_PATTERNS",
    "extract_transaction_id",
    "transaction_link",
    "InvocationResult",
    "update_auth",
]
