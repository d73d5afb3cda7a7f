"""Domain helpers for email normalisation and validation."""
from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def normalize_email(value: str | None) -> str:
    """Strip surrounding whitespace. Case is preserved."""
    return (value or "").strip()


def is_valid_email(value: str | None) -> bool:
    """Return True when value looks like ``local@domain.tld``."""
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value))
