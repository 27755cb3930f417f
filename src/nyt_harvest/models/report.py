"""Aggregate result of a harvest run."""

from dataclasses import dataclass, field
from typing import List, Set

from nyt_harvest.models.record import NormalizedRecord


@dataclass
class HarvestReport:
    """
    Result of PaginatedHarvester.fetch_all_pages().

    records holds every normalized record from successful pages in page
    order; failed_pages holds the index of each page that returned a
    non-200 status, so callers can decide whether to retry them.
    malformed_pages holds the index of each successful page that contained
    at least one document that could not be normalized; skipped_records
    counts those documents.
    """
    records: List[NormalizedRecord] = field(default_factory=list)
    failed_pages: Set[int] = field(default_factory=set)
    malformed_pages: Set[int] = field(default_factory=set)
    skipped_records: int = 0
    pages_requested: int = 0
    pages_succeeded: int = 0
    cancelled: bool = False

    @property
    def record_count(self) -> int:
        return len(self.records)

    def failed_page_list(self) -> List[int]:
        """Failed page indices in ascending order."""
        return sorted(self.failed_pages)
