"""Shared utility functions."""

from __future__ import annotations

import re
import unicodedata
from datetime import date
from typing import Optional, Union

ON_REQUEST_LABELS = {
    "it": "Su richiesta",
    "en": "On request",
}


def generate_slug(text: str) -> str:
    """Derive a URL-safe slug from a display name.

    Accents are folded to their base letter, every run of other characters
    becomes a single hyphen and leading/trailing hyphens are stripped, so
    "Caicco Blu 20m" becomes "caicco-blu-20m". Applying it to its own output
    returns the same string.

    Args:
        text: Name or title to slugify.

    Returns:
        Lowercase slug (may be empty when the text has no letters or digits).
    """
    folded = unicodedata.normalize("NFD", text or "")
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9]+", "-", folded.lower())
    return slug.strip("-")


def format_currency(amount: Optional[float], locale: str = "it") -> str:
    """Format an amount in whole euros, Italian style ("1.200 €").

    None means the price is on request.
    """
    if amount is None:
        return ON_REQUEST_LABELS.get(locale, ON_REQUEST_LABELS["it"])
    whole = int(round(amount))
    grouped = f"{abs(whole):,}".replace(",", ".")
    sign = "-" if whole < 0 else ""
    return f"{sign}{grouped} €"


def format_date_short(value: Union[str, date]) -> str:
    """Format a date as dd/mm/yyyy."""
    d = date.fromisoformat(value) if isinstance(value, str) else value
    return d.strftime("%d/%m/%Y")


def calculate_days(start_date: Union[str, date], end_date: Union[str, date]) -> int:
    """Number of calendar days covered by an inclusive date range."""
    start = date.fromisoformat(start_date) if isinstance(start_date, str) else start_date
    end = date.fromisoformat(end_date) if isinstance(end_date, str) else end_date
    return abs((end - start).days) + 1


def truncate_text(text: str, max_length: int) -> str:
    """Truncate text with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def sanitize_filename(filename: str, max_length: int = 255) -> str:
    """Sanitize an uploaded filename for use as a storage object name.

    Args:
        filename: Original filename.
        max_length: Maximum allowed filename length.

    Returns:
        Filename without path separators or reserved characters.
    """
    # Remove null bytes and path separators
    filename = filename.replace("\x00", "").replace("/", "_").replace("\\", "_")
    # Remove other problematic characters (Windows reserved: < > : " | ? *) and spaces
    filename = re.sub(r'[<>:"|?*\s]', "_", filename)
    # Limit length
    return filename[:max_length]
