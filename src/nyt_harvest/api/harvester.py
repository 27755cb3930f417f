"""
Paginated harvester for the Article Search API.

PaginatedHarvester fetches every page of a search, one at a time in
ascending order, waiting on a delay policy before each call. It tolerates
partial failure:
- a page that returns a non-200 status is skipped and its index recorded
- a document without a byline normalizes to author=None
- a document without pub_date or web_url is skipped and its page recorded
while transport faults and malformed response bodies abort the harvest.
"""

from math import ceil
from typing import Callable, List, Optional, Sequence, Tuple, Union
import logging

from nyt_harvest.config import PAGE_SIZE
from nyt_harvest.exceptions import TransportError, MalformedResponseError
from nyt_harvest.models.page import PageResult
from nyt_harvest.models.record import NormalizedRecord
from nyt_harvest.models.report import HarvestReport
from nyt_harvest.models.requests import SearchQuery
from nyt_harvest.parsers.article_parser import normalize_record
from nyt_harvest.services.export_service import ExportService
from nyt_harvest.services.rate_limit import DelayPolicy, NoDelay, build_delay_policy
from nyt_harvest.services.search_client import ArticleSearchClient

logger = logging.getLogger(__name__)


def partition_by_special_author(
    records: Sequence[NormalizedRecord],
    sentinel_author: str
) -> Tuple[List[NormalizedRecord], List[NormalizedRecord]]:
    """
    Stable partition of records by exact author match.

    Args:
        records: Normalized records in harvest order
        sentinel_author: Author value that marks the secondary category

    Returns:
        (primary, secondary): records whose author equals sentinel_author go
        to secondary, everything else (including author=None) to primary.
        Relative order is preserved within each list.

    Example:
        >>> primary, podcasts = partition_by_special_author(records, "Modern Love")
    """
    primary: List[NormalizedRecord] = []
    secondary: List[NormalizedRecord] = []
    for record in records:
        if record.author is not None and record.author == sentinel_author:
            secondary.append(record)
        else:
            primary.append(record)
    return primary, secondary


class PaginatedHarvester:
    """
    Fetch and normalize all pages of a rate-limited search.

    Design:
    - Sequential: one request at a time, strictly ascending page order
    - Rate limited: delay policy consulted before every call
    - Partial failure: non-200 pages recorded in HarvestReport.failed_pages
    - Cooperative cancellation: optional should_stop() checked once per page

    Example:
        client = ArticleSearchClient.from_config(config)
        harvester = PaginatedHarvester(client, delay_policy=FixedDelay(1.0))

        query = SearchQuery(api_key=key, fq='kicker:("Modern Love")')
        pages = harvester.estimate_total_pages(query)   # 613 hits -> 62
        report = harvester.fetch_all_pages(query, pages)
        print(f"{report.record_count} records, failed pages: {report.failed_page_list()}")
    """

    def __init__(
        self,
        client: ArticleSearchClient,
        delay_policy: Optional[DelayPolicy] = None,
        page_size: int = PAGE_SIZE,
        retry_failed_pages: int = 0,
        exporter: Optional[ExportService] = None
    ):
        """
        Initialize harvester.

        Args:
            client: HTTP client used for every page request
            delay_policy: Default policy applied before each call (NoDelay if None)
            page_size: Documents per page (fixed at 10 by the provider)
            retry_failed_pages: Extra attempts for a non-200 page before it is
                recorded as failed. 0 keeps the drop-and-continue behaviour.
            exporter: When given and it has a raw_dir, each successful page's
                JSON body is persisted there
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got: {page_size}")
        if retry_failed_pages < 0:
            raise ValueError(f"retry_failed_pages must be non-negative, got: {retry_failed_pages}")

        self._client = client
        self._delay = delay_policy or NoDelay()
        self.page_size = page_size
        self.retry_failed_pages = retry_failed_pages
        self._exporter = exporter

    def estimate_total_pages(self, query: SearchQuery) -> int:
        """
        Number of pages needed to cover every hit of the query.

        Issues one request for page 0 and returns ceil(hits / page_size).

        Raises:
            TransportError: If the request fails or returns a non-200 status
            MalformedResponseError: If response.meta.hits is absent or not a number
        """
        result = self._client.fetch_page(query.with_page(0))

        if not result.ok:
            raise TransportError(
                f"Initial search request returned HTTP {result.status_code}",
                status_code=result.status_code
            )

        total_pages = ceil(result.total_hits / self.page_size)
        logger.info(f"Query matches {result.total_hits} documents -> {total_pages} pages")
        return total_pages

    def fetch_page(self, query: SearchQuery, page: int, delay: Optional[DelayPolicy] = None) -> PageResult:
        """
        Fetch one page, waiting on the delay policy first.

        A non-200 page is re-requested up to retry_failed_pages times, with a
        wait before each attempt. The last result is returned either way.
        """
        policy = delay or self._delay
        page_query = query.with_page(page)

        result: Optional[PageResult] = None
        for attempt in range(self.retry_failed_pages + 1):
            policy.wait()
            result = self._client.fetch_page(page_query)
            if result.ok:
                break
            if attempt < self.retry_failed_pages:
                logger.info(
                    f"Retrying page {page} after HTTP {result.status_code} "
                    f"(attempt {attempt + 2}/{self.retry_failed_pages + 1})"
                )
        return result

    def fetch_all_pages(
        self,
        query: SearchQuery,
        page_count: int,
        delay: Union[None, int, float, DelayPolicy] = None,
        should_stop: Optional[Callable[[], bool]] = None
    ) -> HarvestReport:
        """
        Fetch pages 0 .. page_count-1 and normalize their documents.

        Args:
            query: Base query; the page index is merged in per call
            page_count: Number of pages to request (see estimate_total_pages)
            delay: Seconds or DelayPolicy to wait before each call, including
                the first. None uses the harvester's default policy.
            should_stop: Optional callback; when it returns True the loop stops
                before the next page and the report is marked cancelled

        Returns:
            HarvestReport with records from successful pages (in page order),
            the indices of non-200 pages, and the indices of pages with
            documents that could not be normalized

        Raises:
            TransportError: On a network-level failure after transport retries
            MalformedResponseError: If a successful page has an unusable body
                (a single bad document is skipped instead)
        """
        if page_count < 0:
            raise ValueError(f"page_count must be non-negative, got: {page_count}")

        policy = self._delay if delay is None else build_delay_policy(delay)
        report = HarvestReport()

        logger.info(f"Harvesting {page_count} pages with {policy!r}")

        for page in range(page_count):
            if should_stop is not None and should_stop():
                logger.warning(f"Harvest cancelled before page {page}")
                report.cancelled = True
                break

            report.pages_requested += 1

            try:
                result = self.fetch_page(query, page, delay=policy)
            except (TransportError, MalformedResponseError) as e:
                logger.error(
                    f"Aborting harvest at page {page}/{page_count}: {e}",
                    exc_info=True
                )
                raise

            if not result.ok:
                report.failed_pages.add(page)
                continue

            records = self._normalize_page(page, result.records, report)
            report.records.extend(records)
            report.pages_succeeded += 1

            if self._exporter is not None and self._exporter.raw_dir is not None:
                self._exporter.write_page_json(page, result.body)

            logger.debug(f"Page {page}: {len(records)} records")

            if (page + 1) % 10 == 0:
                logger.info(
                    f"Progress: {page + 1}/{page_count} pages, "
                    f"{report.record_count} records, {len(report.failed_pages)} failed"
                )

        logger.info(
            f"Harvest complete: {report.pages_succeeded} pages, "
            f"{report.record_count} records, "
            f"failed pages: {report.failed_page_list() or 'none'}, "
            f"skipped documents: {report.skipped_records}"
        )
        return report

    def _normalize_page(
        self,
        page: int,
        documents: Sequence[dict],
        report: HarvestReport
    ) -> List[NormalizedRecord]:
        """
        Normalize a page's documents, skipping any that lack required fields.

        Skipped documents are counted in report.skipped_records and their page
        is added to report.malformed_pages.
        """
        records: List[NormalizedRecord] = []
        for doc in documents:
            try:
                records.append(self.normalize(doc))
            except MalformedResponseError as e:
                logger.warning(f"Skipping document on page {page}: {e}")
                report.malformed_pages.add(page)
                report.skipped_records += 1
        return records

    @staticmethod
    def normalize(raw_record: dict) -> NormalizedRecord:
        """Normalize one raw document (see parsers.article_parser)."""
        return normalize_record(raw_record)

    @staticmethod
    def partition_by_special_author(
        records: Sequence[NormalizedRecord],
        sentinel_author: str
    ) -> Tuple[List[NormalizedRecord], List[NormalizedRecord]]:
        """Stable partition by author (see module-level function)."""
        return partition_by_special_author(records, sentinel_author)
