"""
Per-page fetch results.

A PageResult is created once per page request, is immutable, and is
discarded after its records have been normalized.
"""

from typing import Any, Dict, List, Literal, Union
from pydantic import BaseModel, Field, ConfigDict


class PageSuccess(BaseModel):
    """A page that returned HTTP 200 with a well-formed body."""

    kind: Literal['success'] = 'success'
    page: int = Field(..., ge=0)
    status_code: int = 200
    total_hits: int = Field(..., ge=0, description="response.meta.hits")
    records: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Raw documents from response.docs, in provider order"
    )
    body: Dict[str, Any] = Field(
        default_factory=dict,
        repr=False,
        description="Decoded JSON body, kept for optional persistence"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return True


class PageFailure(BaseModel):
    """A page whose request completed with a non-200 status."""

    kind: Literal['failure'] = 'failure'
    page: int = Field(..., ge=0)
    status_code: int
    reason: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return False


PageResult = Union[PageSuccess, PageFailure]
