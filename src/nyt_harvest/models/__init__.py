"""
Pydantic models for request/response validation.

This module contains type-safe models for queries, per-page results,
normalized article records and the harvest report.
"""

from nyt_harvest.models.requests import SearchQuery
from nyt_harvest.models.page import PageSuccess, PageFailure, PageResult
from nyt_harvest.models.record import NormalizedRecord, RECORD_COLUMNS
from nyt_harvest.models.report import HarvestReport

__all__ = [
    'SearchQuery',
    'PageSuccess',
    'PageFailure',
    'PageResult',
    'NormalizedRecord',
    'RECORD_COLUMNS',
    'HarvestReport',
]
