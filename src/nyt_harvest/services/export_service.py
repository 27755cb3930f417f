"""
Export service for harvested records.

Writes normalized records to CSV (UTF-8 with BOM so spreadsheet tools pick
up the encoding), persists raw page bodies as JSON, and records failed page
indices for later retries.

Layout:
    {output_dir}/{prefix}_primary.csv
    {output_dir}/{prefix}_secondary.csv
    {output_dir}/{prefix}_failed_pages.csv
    {raw_dir}/{stem}{NN}.json            # one per successful page
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
import json
import logging

import pandas as pd

from nyt_harvest.models.record import NormalizedRecord, RECORD_COLUMNS

logger = logging.getLogger(__name__)

CSV_ENCODING = 'utf-8-sig'


def records_to_dataframe(records: Iterable[NormalizedRecord]) -> pd.DataFrame:
    """
    Convert records to a DataFrame with the export column order.

    An empty input yields an empty DataFrame that still carries the columns.
    """
    rows = [record.to_row() for record in records]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def count_by_year(records: Iterable[NormalizedRecord]) -> pd.Series:
    """
    Count records per publication year.

    Returns:
        Series indexed by year (ascending), named 'articles'

    Example:
        >>> count_by_year(report.records)
        2021    52
        2022    55
        Name: articles, dtype: int64
    """
    years = [record.pub_date.year for record in records]
    counts = pd.Series(years, dtype='int64').value_counts().sort_index()
    counts.name = 'articles'
    return counts


class ExportService:
    """
    File-system export for harvest results.

    Usage:
        exporter = ExportService(output_dir="data/output", raw_dir="data/raw")
        exporter.write_partitions(primary, secondary, prefix="modern_love")
    """

    def __init__(
        self,
        output_dir: str = "data/output",
        raw_dir: Optional[str] = None,
        page_stem: str = "page_"
    ):
        """
        Initialize export service.

        Args:
            output_dir: Directory for CSV files (created if missing)
            raw_dir: Directory for per-page JSON; None disables page dumps
            page_stem: File name stem for page dumps
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.raw_dir = Path(raw_dir) if raw_dir else None
        if self.raw_dir is not None:
            self.raw_dir.mkdir(parents=True, exist_ok=True)

        self.page_stem = page_stem

    def write_csv(self, records: List[NormalizedRecord], filename: str) -> Path:
        """
        Write records to a CSV file.

        Args:
            records: Records to write, in order
            filename: File name inside output_dir

        Returns:
            Path to the written file
        """
        path = self.output_dir / filename
        df = records_to_dataframe(records)
        df.to_csv(path, index=False, encoding=CSV_ENCODING)
        logger.info(f"Wrote {len(df)} records to {path}")
        return path

    def write_partitions(
        self,
        primary: List[NormalizedRecord],
        secondary: List[NormalizedRecord],
        prefix: str
    ) -> Tuple[Path, Path]:
        """Write one CSV per partition: {prefix}_primary.csv and {prefix}_secondary.csv."""
        primary_path = self.write_csv(primary, f"{prefix}_primary.csv")
        secondary_path = self.write_csv(secondary, f"{prefix}_secondary.csv")
        return primary_path, secondary_path

    def page_json_path(self, page: int) -> Path:
        """Path of the JSON dump for a page (two-digit zero-padded suffix)."""
        if self.raw_dir is None:
            raise RuntimeError("Page dumps are disabled: ExportService has no raw_dir")
        return self.raw_dir / f"{self.page_stem}{page:02d}.json"

    def write_page_json(self, page: int, body: Dict[str, Any]) -> Path:
        """
        Persist one page's decoded JSON body.

        Only called for pages that returned HTTP 200.
        """
        path = self.page_json_path(page)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(body, f, ensure_ascii=False, indent=2)
        logger.debug(f"Saved page {page} to {path}")
        return path

    def write_failures_csv(self, failed_pages: Iterable[int], filename: str) -> Optional[Path]:
        """
        Save failed page indices so the missing pages can be re-requested.

        Returns:
            Path to the CSV, or None if there were no failures
        """
        pages = sorted(failed_pages)
        if not pages:
            return None

        path = self.output_dir / filename
        pd.DataFrame({'page': pages}).to_csv(path, index=False, encoding=CSV_ENCODING)
        logger.info(f"Saved {len(pages)} failed page(s) to {path}")
        return path
