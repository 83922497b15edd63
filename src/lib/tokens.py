"""
Color token validation

Classifies an author-supplied color token as a palette name or a raw hex
code. Invalid input is a normal outcome (None), never an exception.
"""

import re
from typing import Any, Optional

from ..models.markup import ColorToken, PALETTE


HEX_COLOR_RE = re.compile(r'^#(?:[0-9a-f]{3}|[0-9a-f]{6})$', re.IGNORECASE)


def token_normalize(raw: Any) -> Optional[ColorToken]:
    """
    Validate and normalize a raw color token

    The token is trimmed and lower-cased, then accepted if it is either a
    palette name or '#' followed by exactly 3 or 6 hex digits.

    Args:
        raw: Token text from an opening marker (may be empty or None)

    Returns:
        ColorToken for valid input, None otherwise

    Example:
        >>> token_normalize(" Red ")
        ColorToken(attr='red', css='#d92b2b')
        >>> token_normalize("#0F0")
        ColorToken(attr='#0f0', css='#0f0')
        >>> token_normalize("#12345") is None
        True
    """
    if not raw:
        return None

    token = str(raw).strip().lower()
    if token in PALETTE:
        return ColorToken(attr=token, css=PALETTE[token])

    if HEX_COLOR_RE.match(token):
        return ColorToken(attr=token, css=token)

    return None


def token_isValid(raw: Any) -> bool:
    """Check if a raw token would produce a ColorToken"""
    return token_normalize(raw) is not None
