"""
Flat article record model.

NormalizedRecord is the uniform tabular shape every search document is
reduced to before export.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


# CSV column order for exports
RECORD_COLUMNS: List[str] = ['pub_date', 'title', 'author', 'snippet', 'web_url']


class NormalizedRecord(BaseModel):
    """
    One article, flattened for CSV export.

    Example:
        >>> record = NormalizedRecord(
        ...     pub_date=date(2023, 5, 12),
        ...     title='A Love Story',
        ...     author='Jane Doe',
        ...     snippet='...',
        ...     web_url='https://www.nytimes.com/2023/05/12/style/modern-love.html'
        ... )
        >>> record.to_row()[0]
        '2023-05-12'
    """

    pub_date: date = Field(..., description="Publication date")
    title: str = Field(default="", description="headline.main")
    author: Optional[str] = Field(
        default=None,
        description="byline.original without the leading 'By '; None when absent"
    )
    snippet: str = Field(default="", description="Short abstract")
    web_url: str = Field(..., description="Canonical article URL")

    model_config = ConfigDict(frozen=True)

    def to_row(self) -> List[Optional[str]]:
        """Return the record as a CSV row in RECORD_COLUMNS order."""
        return [
            self.pub_date.isoformat(),
            self.title,
            self.author,
            self.snippet,
            self.web_url,
        ]

    def __str__(self) -> str:
        return f"{self.pub_date} {self.title} ({self.author or 'no byline'})"
