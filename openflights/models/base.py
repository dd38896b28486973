"""
Shared helpers for the entity models.

Codes (IATA airport and airline designators) are the natural keys routes
use to reference other entities. They are compared case-insensitively, so
every code is normalized here before it is stored or looked up.
"""

from typing import Optional

# OpenFlights writes SQL NULL as a literal backslash-N
NULL_TOKEN = '\\N'

# Placeholder shown for an airline or airport a route refers to but the
# store no longer holds
UNKNOWN = 'Unknown'


def normalize_code(value: Optional[str]) -> Optional[str]:
    """
    Normalize an IATA code for storage or lookup.

    Strips whitespace and uppercases. Empty values and the NULL token
    mean "no code" and normalize to None.
    """
    if value is None:
        return None
    code = str(value).strip().upper()
    if not code or code == NULL_TOKEN:
        return None
    return code


def clean_text(value: Optional[str]) -> str:
    """Return a field value with the NULL token mapped to an empty string."""
    if value is None:
        return ''
    text = str(value).strip()
    return '' if text == NULL_TOKEN else text
