"""Transaction id extraction from free-form client output.

The external client prints human-oriented text rather than a structured
document, so the transaction id is recovered heuristically. Patterns are
tried in order and the first capture wins. The bare 64-hex fallback can
pick up other hashes (block ids, for example) when the labeled form is
absent; callers that know a client's exact output can pass their own
pattern list.
"""

from __future__ import annotations

import re
from typing import Pattern, Sequence

DEFAULT_EXPLORER_BASE = "https://explorer.xprnetwork.org"

LABELED_TRANSACTION_ID = re.compile(r"transaction[_\s]id[:\s]+([a-f0-9]+)", re.IGNORECASE)
BARE_TRANSACTION_ID = re.compile(r"([a-f0-9]{64})")

TRANSACTION_ID_PATTERNS: tuple[Pattern[str], ...] = (
    LABELED_TRANSACTION_ID,
    BARE_TRANSACTION_ID,
)


def extract_transaction_id(
    output: str,
    patterns: Sequence[Pattern[str]] = TRANSACTION_ID_PATTERNS,
) -> str | None:
    for pattern in patterns:
        match = pattern.search(output)
        if match:
            return match.group(1)
    return None


def transaction_link(
    transaction_id: str | None, explorer_base: str = DEFAULT_EXPLORER_BASE
) -> str | None:
    if not transaction_id:
        return None
    return f"{explorer_base.rstrip('/')}/transaction/{transaction_id}"
