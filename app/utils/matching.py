"""Merchant name matching utilities"""
from app.schemas.merchant import Merchant


def merchant_key(name: str) -> str:
    """
    Build the lookup key of a merchant name.

    Args:
        name: Merchant name as typed by the user

    Returns:
        Lower-cased name with all spaces removed
    """
    if not name:
        return ""
    return name.lower().replace(" ", "")


def normalize_display_name(name: str) -> str:
    """Lower-case and trim a display name for equality checks."""
    return (name or "").lower().strip()


def find_by_display_name(merchants: list[Merchant], name: str) -> Merchant | None:
    """
    Find the first merchant whose display name matches ``name``.

    Matching is exact after lower-casing and trimming both sides; the merchant
    key is not consulted.

    Args:
        merchants: Candidate merchants (one user's)
        name: Merchant name entered by the user

    Returns:
        Matching Merchant or None
    """
    normalized = normalize_display_name(name)
    if not normalized:
        return None
    for merchant in merchants:
        if normalize_display_name(merchant.display_name) == normalized:
            return merchant
    return None


def matches_search(merchant: Merchant, search_text: str) -> bool:
    """Case-insensitive substring match on display name, key or note category."""
    needle = search_text.lower()
    haystacks = [merchant.display_name, merchant.merchant_key, merchant.note.category or ""]
    return any(needle in value.lower() for value in haystacks)
