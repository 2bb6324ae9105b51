"""Utility modules"""
from app.utils.matching import (
    merchant_key,
    normalize_display_name,
    find_by_display_name,
    matches_search,
)

__all__ = [
    "merchant_key",
    "normalize_display_name",
    "find_by_display_name",
    "matches_search",
]
