"""
Article Search HTTP client.

Thin wrapper over a requests Session that fetches one result page and
classifies the outcome:
- HTTP 200 with a well-formed body  -> PageSuccess
- any other HTTP status             -> PageFailure (non-fatal)
- network failure after retries     -> TransportError (fatal)
- HTTP 200 with an unusable body    -> MalformedResponseError (fatal)

Connection errors and 429/5xx responses are retried by the transport
adapter with exponential backoff before any of the above applies.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode, quote
import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from nyt_harvest.config import DEFAULT_SEARCH_URL, AppConfig
from nyt_harvest.exceptions import TransportError, MalformedResponseError
from nyt_harvest.models.page import PageSuccess, PageFailure, PageResult
from nyt_harvest.models.requests import SearchQuery
from nyt_harvest.parsers.article_parser import extract_path

logger = logging.getLogger(__name__)

# '%' is kept so that pre-encoded filter values (%22) are sent unchanged
QUERY_SAFE_CHARS = ':()%,'

RETRY_STATUS_CODES = [429, 500, 502, 503, 504]


def create_session(retries: int = 3, backoff_factor: float = 0.5) -> requests.Session:
    """
    Create a requests session with retry logic.

    Exhausted status retries return the last response rather than raising,
    so a persistent 5xx surfaces as a PageFailure.

    Args:
        retries: Number of retries for failed requests
        backoff_factor: Backoff factor for retries

    Returns:
        Configured requests.Session instance
    """
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=frozenset(['GET']),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session


def build_search_url(base_url: str, params: Dict[str, Any]) -> str:
    """
    Build the request URL with an explicitly encoded query string.

    Example:
        >>> build_search_url('https://x/articlesearch.json',
        ...                  {'api-key': 'k', 'fq': 'kicker:(%22Modern Love%22)', 'page': 2})
        'https://x/articlesearch.json?api-key=k&fq=kicker:(%22Modern%20Love%22)&page=2'
    """
    query = urlencode(params, quote_via=quote, safe=QUERY_SAFE_CHARS)
    return f"{base_url}?{query}"


def parse_search_body(body: Any) -> Tuple[int, List[Dict[str, Any]]]:
    """
    Extract (total hits, documents) from a decoded search response.

    Raises:
        MalformedResponseError: If response.meta.hits is absent or not a
            number, or response.docs is not a list
    """
    if not isinstance(body, dict) or not isinstance(body.get('response'), dict):
        raise MalformedResponseError("Search response has no 'response' object")

    hits = extract_path(body, 'response.meta.hits')
    if isinstance(hits, bool) or not isinstance(hits, (int, float)):
        raise MalformedResponseError(
            f"response.meta.hits is missing or not a number: {hits!r}"
        )
    if hits < 0 or (isinstance(hits, float) and not hits.is_integer()):
        raise MalformedResponseError(f"response.meta.hits is not a valid count: {hits!r}")

    docs = body['response'].get('docs')
    if docs is None:
        docs = []
    if not isinstance(docs, list):
        raise MalformedResponseError(
            f"response.docs must be a list, got {type(docs).__name__}"
        )
    if not all(isinstance(doc, dict) for doc in docs):
        raise MalformedResponseError("response.docs contains non-object entries")

    return int(hits), docs


class ArticleSearchClient:
    """
    HTTP client for the Article Search API.

    Usage:
        with ArticleSearchClient.from_config(get_app_config()) as client:
            result = client.fetch_page(query.with_page(0))
            if result.ok:
                print(result.total_hits)

    Context Manager:
        The underlying session is closed on exit.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SEARCH_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Search endpoint
            timeout: Per-call timeout in seconds
            max_retries: Transport-level retries
            backoff_factor: Backoff factor between retries
            session: Pre-built session (tests inject a mock here)
        """
        self.base_url = base_url
        self.timeout = timeout
        self._session = session or create_session(max_retries, backoff_factor)

    @classmethod
    def from_config(cls, config: AppConfig) -> 'ArticleSearchClient':
        """Build a client from application configuration."""
        return cls(
            base_url=config.search_url,
            timeout=config.request_timeout_sec,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
        )

    def fetch_page(self, query: SearchQuery) -> PageResult:
        """
        Fetch the page the query points at (page 0 if unset).

        Returns:
            PageSuccess for HTTP 200, PageFailure for any other status

        Raises:
            TransportError: On connection failure, timeout, or exhausted retries
            MalformedResponseError: On HTTP 200 with an unusable body
        """
        page = query.page or 0
        url = build_search_url(self.base_url, query.to_params())

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Transport failure fetching page {page}: {e}")
            raise TransportError(f"Request for page {page} failed: {e}") from e

        if response.status_code != 200:
            logger.warning(
                f"Page {page} returned HTTP {response.status_code} ({response.reason})"
            )
            return PageFailure(
                page=page,
                status_code=response.status_code,
                reason=str(response.reason or ''),
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Page {page} body is not valid JSON") from e

        hits, docs = parse_search_body(body)
        logger.debug(f"Page {page}: {len(docs)} documents, {hits} total hits")

        return PageSuccess(
            page=page,
            status_code=response.status_code,
            total_hits=hits,
            records=docs,
            body=body,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> 'ArticleSearchClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
