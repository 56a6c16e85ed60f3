"""Postal code prefix normalization."""

from __future__ import annotations

import re
from typing import Iterable

PREFIX_LENGTH = 3
# Canadian forward sortation area: letter, digit, letter.
POSTAL_PREFIX_PATTERN = re.compile(r"^[A-Za-z]\d[A-Za-z]")

_WHITESPACE = re.compile(r"\s+")
_STORED_PREFIX = re.compile(r"^[A-Z0-9]{3}$")


def normalize_postal_code(code: str) -> str:
    """Strip whitespace, uppercase and truncate to the 3-character prefix."""

    return _WHITESPACE.sub("", code).upper()[:PREFIX_LENGTH]


def is_valid_postal_prefix(code: str) -> bool:
    return bool(POSTAL_PREFIX_PATTERN.match(code or ""))


def normalize_postal_codes(codes: Iterable[str]) -> list[str]:
    """Normalize codes for storage, dropping duplicates while keeping order.

    Raises ``ValueError`` when a code does not reduce to 3 alphanumeric characters.
    """

    normalized: list[str] = []
    for code in codes:
        prefix = normalize_postal_code(str(code))
        if not _STORED_PREFIX.match(prefix):
            raise ValueError(f"Invalid postal code '{code}': expected a 3-character prefix such as V6B")
        if prefix not in normalized:
            normalized.append(prefix)
    return normalized
