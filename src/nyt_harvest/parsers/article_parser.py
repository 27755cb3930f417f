"""
Article document parser.

Reduces one Article Search document (a schema-less, partially populated
JSON mapping) to a NormalizedRecord. Nested fields are read through dotted
key paths so that absent intermediate objects degrade to None instead of
raising.

Byline handling:
- byline.original present and non-empty -> author, minus one leading 'By '
- byline absent, null, empty, or without 'original' -> author is None
  (interactive features and some podcasts legitimately carry no byline)
"""

from datetime import date, datetime
from typing import Any, Dict, Optional
import logging

from nyt_harvest.exceptions import MalformedResponseError
from nyt_harvest.models.record import NormalizedRecord

logger = logging.getLogger(__name__)

BYLINE_PREFIX = "By "


def extract_path(document: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Read a nested value by dotted key path.

    Args:
        document: Raw JSON mapping
        path: Dotted path, e.g. 'headline.main'
        default: Returned when any segment is missing or not a mapping

    Returns:
        The value at path, or default

    Example:
        >>> extract_path({'headline': {'main': 'Title'}}, 'headline.main')
        'Title'
        >>> extract_path({'byline': None}, 'byline.original') is None
        True
    """
    current: Any = document
    for key in path.split('.'):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return default if current is None else current


def strip_byline_prefix(byline: str) -> str:
    """
    Remove exactly one leading 'By ' (case-sensitive).

    Example:
        >>> strip_byline_prefix('By Jane Doe')
        'Jane Doe'
        >>> strip_byline_prefix('THE NEW YORK TIMES')
        'THE NEW YORK TIMES'
        >>> strip_byline_prefix('By By Line')
        'By Line'
    """
    if byline.startswith(BYLINE_PREFIX):
        return byline[len(BYLINE_PREFIX):]
    return byline


def parse_author(document: Dict[str, Any]) -> Optional[str]:
    """Extract the author from byline.original, or None when there is none."""
    byline = document.get('byline')
    if not byline or not isinstance(byline, dict):
        return None

    original = byline.get('original')
    if not original or not isinstance(original, str):
        return None

    return strip_byline_prefix(original)


def parse_pub_date(value: Any) -> date:
    """
    Parse the provider's ISO timestamp ('2023-05-12T04:00:07+0000') to a date.

    Raises:
        MalformedResponseError: If value is missing or not an ISO date
    """
    if not value or not isinstance(value, str):
        raise MalformedResponseError(f"Document has no usable pub_date: {value!r}")

    try:
        return datetime.strptime(value[:10], '%Y-%m-%d').date()
    except ValueError as e:
        raise MalformedResponseError(f"Unparseable pub_date: {value!r}") from e


def normalize_record(document: Dict[str, Any]) -> NormalizedRecord:
    """
    Normalize one raw search document.

    Pure function: calling it twice on the same document yields equal records.

    Args:
        document: One entry of response.docs

    Returns:
        NormalizedRecord

    Raises:
        MalformedResponseError: If document is not a mapping, or pub_date or
            web_url is missing. A missing byline never raises.
    """
    if not isinstance(document, dict):
        raise MalformedResponseError(
            f"Expected a JSON object for a search document, got {type(document).__name__}"
        )

    web_url = extract_path(document, 'web_url')
    if not web_url:
        raise MalformedResponseError(
            f"Document {document.get('_id', '<no id>')} has no web_url"
        )

    author = parse_author(document)
    if author is None:
        logger.debug(f"No byline for {web_url}")

    return NormalizedRecord(
        pub_date=parse_pub_date(document.get('pub_date')),
        title=str(extract_path(document, 'headline.main', '')),
        author=author,
        snippet=str(extract_path(document, 'snippet', '')),
        web_url=str(web_url),
    )
