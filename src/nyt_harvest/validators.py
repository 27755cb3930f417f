"""
Reusable field validators for Pydantic models.

These validators enforce the Article Search wire contract and can be used
with the Pydantic @field_validator decorator for automatic input validation.
"""

from typing import Optional


def validate_page_index(page: Optional[int]) -> Optional[int]:
    """
    Validate a zero-based result page index.

    Args:
        page: Page index, or None when the query targets no particular page

    Returns:
        The validated page index (unchanged if valid)

    Raises:
        ValueError: If page is negative or not an integer

    Example:
        >>> validate_page_index(0)
        0
        >>> validate_page_index(-1)  # Raises ValueError
    """
    if page is None:
        return page

    # bool is an int subclass; True/False are never meant as page numbers
    if isinstance(page, bool) or not isinstance(page, int):
        raise ValueError(f"Page index must be an integer, got: {page!r}")

    if page < 0:
        raise ValueError(f"Page index must be non-negative, got: {page}")

    return page


def validate_api_key(key: str) -> str:
    """
    Validate that an API key is a non-blank string.

    Raises:
        ValueError: If the key is empty or whitespace only
    """
    if not key or not key.strip():
        raise ValueError(
            "API key must not be empty. "
            "Set NYT_API_KEY in .env or pass api_key explicitly."
        )
    return key.strip()


def encode_filter_query(fq: Optional[str], encode_parentheses: bool = False) -> Optional[str]:
    """
    Percent-encode the characters the Article Search filter expects pre-encoded.

    The provider only matches field-scoped phrase filters when the quotation
    marks arrive as %22, so they must be encoded before the filter is placed
    in the URL rather than left to automatic encoding. Parentheses stay
    literal unless encode_parentheses is set. Already-encoded input is
    returned unchanged, so the function is idempotent.

    Args:
        fq: Filter expression, e.g. 'kicker:("Modern Love")'
        encode_parentheses: Also encode '(' and ')' as %28 / %29

    Returns:
        The encoded filter, or None if fq is None

    Example:
        >>> encode_filter_query('kicker:("Modern Love")')
        'kicker:(%22Modern Love%22)'
        >>> encode_filter_query('kicker:(%22Modern Love%22)')
        'kicker:(%22Modern Love%22)'
        >>> encode_filter_query('kicker:("Modern Love")', encode_parentheses=True)
        'kicker:%28%22Modern Love%22%29'
    """
    if fq is None:
        return fq

    encoded = fq.replace('"', '%22')
    if encode_parentheses:
        encoded = encoded.replace('(', '%28').replace(')', '%29')
    return encoded
