"""
Request models for search operations.

SearchQuery is the immutable parameter set sent to the Article Search API.
The page index is merged in per call via with_page().
"""

from typing import Dict, Optional, Union
from pydantic import BaseModel, Field, field_validator, ConfigDict

from nyt_harvest.validators import (
    validate_api_key,
    validate_page_index,
    encode_filter_query
)


class SearchQuery(BaseModel):
    """
    Immutable Article Search query.

    Attributes:
        api_key: Provider API key (sent as 'api-key')
        fq: Filter expression; quotation marks are percent-encoded on creation
        q: Optional free-text search terms
        page: Zero-based result page, or None
        extra: Additional provider parameters (sort, begin_date, ...)

    Example:
        >>> query = SearchQuery(api_key='abc123', fq='kicker:("Modern Love")')
        >>> query.fq
        'kicker:(%22Modern Love%22)'
        >>> query.with_page(3).to_params()
        {'api-key': 'abc123', 'fq': 'kicker:(%22Modern Love%22)', 'page': 3}

    Raises:
        ValidationError: If api_key is blank or page is negative
    """

    api_key: str = Field(
        ...,
        repr=False,
        description="Article Search API key"
    )

    fq: Optional[str] = Field(
        default=None,
        description="Field-scoped filter expression",
        examples=['kicker:(%22Modern Love%22)']
    )

    q: Optional[str] = Field(
        default=None,
        description="Free-text search terms"
    )

    page: Optional[int] = Field(
        default=None,
        description="Zero-based result page index"
    )

    extra: Dict[str, Union[str, int, float]] = Field(
        default_factory=dict,
        description="Additional provider query parameters"
    )

    @field_validator('api_key')
    @classmethod
    def check_api_key(cls, v: str) -> str:
        return validate_api_key(v)

    @field_validator('page')
    @classmethod
    def check_page(cls, v: Optional[int]) -> Optional[int]:
        return validate_page_index(v)

    @field_validator('fq')
    @classmethod
    def encode_fq(cls, v: Optional[str]) -> Optional[str]:
        """Pre-encode quotation marks in the filter."""
        return encode_filter_query(v)

    model_config = ConfigDict(frozen=True)

    def with_page(self, page: int) -> 'SearchQuery':
        """Return a copy of this query targeting the given page."""
        return SearchQuery(
            api_key=self.api_key,
            fq=self.fq,
            q=self.q,
            page=page,
            extra=dict(self.extra)
        )

    def to_params(self) -> Dict[str, Union[str, int, float]]:
        """Build the wire-level query parameter mapping."""
        params: Dict[str, Union[str, int, float]] = {'api-key': self.api_key}
        if self.fq is not None:
            params['fq'] = self.fq
        if self.q is not None:
            params['q'] = self.q
        if self.page is not None:
            params['page'] = self.page
        for key, value in self.extra.items():
            params.setdefault(key, value)
        return params
