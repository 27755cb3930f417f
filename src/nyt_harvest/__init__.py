"""
nyt-harvest: paginated Article Search harvesting and CSV export.

Main package exports for user-facing API.
"""

from nyt_harvest.api import PaginatedHarvester, HarvestPipeline, partition_by_special_author
from nyt_harvest.models import SearchQuery, NormalizedRecord, HarvestReport
from nyt_harvest.services import ArticleSearchClient, ExportService, FixedDelay, TokenBucket, NoDelay
from nyt_harvest.exceptions import (
    HarvestError,
    TransportError,
    MalformedResponseError,
    ConfigurationError
)

__version__ = '0.1.0'

__all__ = [
    'PaginatedHarvester',
    'HarvestPipeline',
    'partition_by_special_author',
    'SearchQuery',
    'NormalizedRecord',
    'HarvestReport',
    'ArticleSearchClient',
    'ExportService',
    'FixedDelay',
    'TokenBucket',
    'NoDelay',
    'HarvestError',
    'TransportError',
    'MalformedResponseError',
    'ConfigurationError',
]
