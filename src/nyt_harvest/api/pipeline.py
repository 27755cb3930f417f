"""
High-level pipeline orchestrator for article harvesting.

HarvestPipeline coordinates the complete workflow:
- Estimate the page count (one probe request)
- Fetch and normalize every page (via PaginatedHarvester)
- Partition records by the sentinel author
- Export one CSV per partition, plus failed page indices

Design Philosophy:
- Explicit dependencies (harvester and exporter injected by user)
- Resilient processing (non-200 pages recorded, harvest continues)
- Statistics-based monitoring (returns actionable metrics)
"""

from typing import Callable, Dict, Optional
import logging

from nyt_harvest.api.harvester import PaginatedHarvester
from nyt_harvest.config import AppConfig
from nyt_harvest.models.report import HarvestReport
from nyt_harvest.models.requests import SearchQuery
from nyt_harvest.services.export_service import ExportService
from nyt_harvest.services.rate_limit import FixedDelay
from nyt_harvest.services.search_client import ArticleSearchClient

logger = logging.getLogger(__name__)


class HarvestPipeline:
    """
    Orchestrator for estimate -> fetch -> partition -> export.

    Example:
        config = get_app_config()
        pipeline = HarvestPipeline.from_config(config)

        query = SearchQuery(api_key=config.resolve_api_key(), fq='kicker:("Modern Love")')
        stats = pipeline.run(query, sentinel_author=config.sentinel_author,
                             output_prefix="modern_love")
        print(f"{stats['records']} records, {stats['failed']} failed pages")
    """

    def __init__(self, harvester: PaginatedHarvester, exporter: ExportService):
        """
        Initialize pipeline with injected collaborators.

        Args:
            harvester: Configured PaginatedHarvester
            exporter: ExportService receiving the CSV files
        """
        self._harvester = harvester
        self._exporter = exporter
        self.last_report: Optional[HarvestReport] = None
        logger.info("HarvestPipeline initialized")

    @classmethod
    def from_config(cls, config: AppConfig, save_raw_pages: bool = True) -> 'HarvestPipeline':
        """
        Build the pipeline and its collaborators from application configuration.

        Args:
            config: AppConfig (see get_app_config())
            save_raw_pages: Persist each successful page's JSON under config.raw_dir
        """
        exporter = ExportService(
            output_dir=config.output_dir,
            raw_dir=config.raw_dir if save_raw_pages else None
        )
        harvester = PaginatedHarvester(
            client=ArticleSearchClient.from_config(config),
            delay_policy=FixedDelay(config.request_delay_sec),
            page_size=config.page_size,
            retry_failed_pages=config.retry_failed_pages,
            exporter=exporter
        )
        return cls(harvester=harvester, exporter=exporter)

    def run(
        self,
        query: SearchQuery,
        sentinel_author: str,
        output_prefix: str,
        max_pages: Optional[int] = None,
        should_stop: Optional[Callable[[], bool]] = None
    ) -> Dict[str, int]:
        """
        Complete workflow: estimate -> fetch -> partition -> export.

        Args:
            query: Base search query
            sentinel_author: Author routed to the secondary CSV
            output_prefix: File name prefix for the CSV outputs
            max_pages: Optional cap on the number of pages requested
            should_stop: Cooperative cancellation callback

        Returns:
            Statistics dictionary:
            {
                'pages_estimated': 62,
                'pages': 61,        # pages fetched successfully
                'failed': 1,        # non-200 pages
                'skipped': 0,       # documents that could not be normalized
                'records': 610,
                'primary': 540,
                'secondary': 70
            }

        Raises:
            TransportError, MalformedResponseError: Propagated from the harvester
        """
        stats = self._init_statistics()

        pages_estimated = self._harvester.estimate_total_pages(query)
        stats['pages_estimated'] = pages_estimated

        page_count = pages_estimated
        if max_pages is not None:
            page_count = min(page_count, max_pages)
            if page_count < pages_estimated:
                logger.info(f"Capping harvest at {page_count} of {pages_estimated} pages")

        report = self._harvester.fetch_all_pages(query, page_count, should_stop=should_stop)
        self.last_report = report

        primary, secondary = self._harvester.partition_by_special_author(
            report.records, sentinel_author
        )
        self._exporter.write_partitions(primary, secondary, prefix=output_prefix)
        self._exporter.write_failures_csv(
            report.failed_pages, f"{output_prefix}_failed_pages.csv"
        )

        stats['pages'] = report.pages_succeeded
        stats['failed'] = len(report.failed_pages)
        stats['skipped'] = report.skipped_records
        stats['records'] = report.record_count
        stats['primary'] = len(primary)
        stats['secondary'] = len(secondary)

        logger.info(
            f"Pipeline complete: {stats['records']} records "
            f"({stats['primary']} primary, {stats['secondary']} '{sentinel_author}'), "
            f"{stats['failed']} failed pages, {stats['skipped']} skipped documents"
        )
        return stats

    def _init_statistics(self) -> Dict[str, int]:
        """
        Initialize statistics dictionary.

        Returns:
            Statistics dict with counters set to zero
        """
        return {
            'pages_estimated': 0,
            'pages': 0,
            'failed': 0,
            'skipped': 0,
            'records': 0,
            'primary': 0,
            'secondary': 0
        }
