"""
User-facing API interfaces for nyt-harvest.

This module provides the paginated harvester and the end-to-end pipeline.
"""

from nyt_harvest.api.harvester import PaginatedHarvester, partition_by_special_author
from nyt_harvest.api.pipeline import HarvestPipeline

__all__ = [
    'PaginatedHarvester',
    'partition_by_special_author',
    'HarvestPipeline'
]
