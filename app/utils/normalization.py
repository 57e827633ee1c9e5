"""Data normalization utilities for consistent data quality."""

import unicodedata
from typing import Optional


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Normalize email to lowercase.

    Args:
        email: Raw email input

    Returns:
        Lowercased email or None if empty
    """
    if not email:
        return None
    return email.strip().lower()


def normalize_username(username: Optional[str]) -> Optional[str]:
    """Usernames are case-insensitive; store them lowercased and trimmed."""
    if not username:
        return None
    return username.strip().lower() or None


def normalize_name(name: Optional[str]) -> Optional[str]:
    """
    Normalize name by stripping whitespace and collapsing multiple spaces.

    Args:
        name: Raw name input

    Returns:
        Cleaned name or None if empty
    """
    if not name:
        return None
    # Strip leading/trailing whitespace and collapse internal spaces
    return " ".join(name.split()) or None


def _strip_accents(value: str) -> str:
    """Remove diacritics for accent-insensitive matching."""
    return "".join(
        ch for ch in unicodedata.normalize("NFKD", value) if not unicodedata.combining(ch)
    )


def normalize_search_text(value: Optional[str]) -> Optional[str]:
    """
    Normalize free-text for search matching.

    - Strip accents
    - Lowercase
    - Collapse whitespace
    """
    if not value:
        return None
    collapsed = " ".join(value.split())
    if not collapsed:
        return None
    return _strip_accents(collapsed).lower()
