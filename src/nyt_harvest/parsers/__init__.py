"""
Parsers for Article Search documents.

Provides key-path extraction and normalization of raw JSON documents into
flat NormalizedRecord rows.
"""

from nyt_harvest.parsers.article_parser import (
    extract_path,
    strip_byline_prefix,
    parse_author,
    parse_pub_date,
    normalize_record,
)

__all__ = [
    'extract_path',
    'strip_byline_prefix',
    'parse_author',
    'parse_pub_date',
    'normalize_record',
]
