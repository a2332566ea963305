"""
Validation helpers shared by schemas and services.
Provides patterns, string cleaners and datetime normalization.
"""

import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional


# Account phone numbers are stored as exactly ten digits
USER_PHONE_PATTERN = re.compile(r"^[0-9]{10}$")

# Contact numbers on inquiries: optional leading +, 7 to 15 digits
CONTACT_PHONE_PATTERN = re.compile(r"^\+?[0-9]{7,15}$")


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive values are taken to already be in UTC, which is how SQLite
    hands stored timestamps back.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def clean_required_text(value: str, field_name: str) -> str:
    """Strip a required text value and reject blanks."""
    if value is None or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()


def clean_string_list(values: Iterable[str]) -> List[str]:
    """Strip entries, drop blanks and duplicates, keep first-seen order."""
    cleaned: List[str] = []
    for value in values:
        item = value.strip()
        if item and item not in cleaned:
            cleaned.append(item)
    return cleaned


def normalize_phone(value: str) -> str:
    """Remove spaces and dashes people type into phone numbers."""
    return re.sub(r"[\s\-()]", "", value)
