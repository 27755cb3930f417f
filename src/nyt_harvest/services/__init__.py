"""
Service layer for nyt-harvest.

- ArticleSearchClient: HTTP access to the Article Search API
- DelayPolicy strategies: FixedDelay, TokenBucket, NoDelay
- ExportService: CSV export and raw page persistence
"""

from nyt_harvest.services.search_client import ArticleSearchClient, create_session
from nyt_harvest.services.rate_limit import (
    DelayPolicy,
    FixedDelay,
    TokenBucket,
    NoDelay,
    build_delay_policy
)
from nyt_harvest.services.export_service import (
    ExportService,
    records_to_dataframe,
    count_by_year
)

__all__ = [
    'ArticleSearchClient',
    'create_session',
    'DelayPolicy',
    'FixedDelay',
    'TokenBucket',
    'NoDelay',
    'build_delay_policy',
    'ExportService',
    'records_to_dataframe',
    'count_by_year'
]
