"""Utility modules."""

from app.utils.normalization import (
    normalize_email,
    normalize_name,
    normalize_search_text,
    normalize_username,
)
from app.utils.pagination import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    PaginationParams,
    get_pagination,
)

__all__ = [
    "normalize_email",
    "normalize_name",
    "normalize_search_text",
    "normalize_username",
    "DEFAULT_PER_PAGE",
    "MAX_PER_PAGE",
    "PaginationParams",
    "get_pagination",
]
