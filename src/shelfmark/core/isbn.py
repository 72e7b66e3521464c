"""ISBN cleanup and digit-length validation."""

from __future__ import annotations

import re

from .errors import InvalidIsbn

_SEPARATORS = re.compile(r"[-\s]")
_ISBN_DIGITS = re.compile(r"^[0-9]{10,13}$")


def is_normalized_isbn(value: object) -> bool:
    return isinstance(value, str) and bool(_ISBN_DIGITS.fullmatch(value))


def normalize_isbn(raw: str) -> str:
    """Strip hyphens and whitespace and check for 10-13 decimal digits.

    Raises InvalidIsbn carrying the rejected input. Idempotent on success.
    """
    if raw is None or not str(raw).strip():
        raise InvalidIsbn(raw or "", "Please enter an ISBN number")
    cleaned = _SEPARATORS.sub("", str(raw))
    if not is_normalized_isbn(cleaned):
        raise InvalidIsbn(raw)
    return cleaned
