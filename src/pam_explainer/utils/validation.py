"""Rule hash validation for caller-supplied overrides.

Override keys (CLI --override, API overrides) address rules by rule_hash,
the lowercase SHA-256 hex digest computed in pdp/rule.py. Keys are accepted
in any case and with surrounding whitespace, then normalized so they compare
equal to the stored hash.
"""

from __future__ import annotations

__all__ = [
    "RULE_HASH_LENGTH",
    "normalize_rule_hash",
]

import string

# hexdigest() of SHA-256
RULE_HASH_LENGTH: int = 64

_HEX_DIGITS: frozenset[str] = frozenset(string.hexdigits.lower())


def normalize_rule_hash(value: str) -> str | None:
    """Normalize an override key to the form rule_hash is stored in.

    Returns:
        The lowercase digest, or None if value is not a SHA-256 hex digest.
    """
    normalized = value.strip().lower()
    if len(normalized) != RULE_HASH_LENGTH or not _HEX_DIGITS.issuperset(normalized):
        return None
    return normalized
