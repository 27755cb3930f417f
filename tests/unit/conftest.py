"""
Pytest configuration for unit tests.

Provides fixtures and factories that apply to all unit tests:
- Config isolation (no .env or NYT_* variables leak into tests)
- Article Search documents, bodies and HTTP responses
- A mocked ArticleSearchClient serving synthetic pages
"""

import json

import pytest
import requests
from unittest.mock import Mock

from nyt_harvest.models.page import PageSuccess, PageFailure
from nyt_harvest.services.search_client import ArticleSearchClient


CONFIG_ENV_VARS = [
    'NYT_API_KEY', 'NYT_CREDENTIALS_FILE', 'SEARCH_URL', 'PAGE_SIZE',
    'REQUEST_DELAY_SEC', 'REQUEST_TIMEOUT_SEC', 'MAX_RETRIES', 'BACKOFF_FACTOR',
    'RETRY_FAILED_PAGES', 'OUTPUT_DIR', 'RAW_DIR', 'SENTINEL_AUTHOR',
]


@pytest.fixture(autouse=True, scope="function")
def isolate_app_config(monkeypatch, tmp_path):
    """
    Run every unit test without the developer's .env or environment.

    The working directory is moved to an empty tmp dir so AppConfig finds
    no .env file, and the cached singleton is reset before and after.
    """
    import nyt_harvest.config as config_module

    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, '_app_config', None)
    yield
    config_module._app_config = None


def _make_doc(index, author="By Jane Doe", pub_date="2023-05-12T04:00:07+0000"):
    doc = {
        "_id": f"nyt://article/{index}",
        "pub_date": pub_date,
        "headline": {"main": f"Title {index}", "kicker": "Modern Love"},
        "snippet": f"Snippet {index}",
        "web_url": f"https://www.nytimes.com/2023/05/12/style/modern-love-{index}.html",
    }
    if author is not None:
        doc["byline"] = {"original": author, "person": []}
    return doc


def _make_body(docs, hits):
    return {
        "status": "OK",
        "copyright": "Copyright (c) The New York Times Company.",
        "response": {
            "docs": docs,
            "meta": {"hits": hits, "offset": 0, "time": 12},
        },
    }


@pytest.fixture
def doc_factory():
    """Build one raw search document; author=None omits the byline."""
    return _make_doc


@pytest.fixture
def body_factory():
    """Build a decoded search response body."""
    return _make_body


@pytest.fixture
def response_factory():
    """Build a real requests.Response with a JSON (or raw) payload."""
    def make_response(status_code=200, body=None, reason=None, raw=None):
        response = requests.Response()
        response.status_code = status_code
        response.reason = reason or ("OK" if status_code == 200 else "Forbidden")
        if raw is not None:
            response._content = raw
        elif body is not None:
            response._content = json.dumps(body).encode('utf-8')
        else:
            response._content = b''
        response.encoding = 'utf-8'
        return response
    return make_response


@pytest.fixture
def paged_client_factory():
    """
    Mock ArticleSearchClient that serves `hits` documents, 10 per page.

    Pages listed in `failing` return a PageFailure with `status`.
    """
    def make_client(hits, failing=(), status=403):
        def fetch_page(query):
            page = query.page or 0
            if page in failing:
                return PageFailure(page=page, status_code=status, reason="Forbidden")
            start = page * 10
            count = max(0, min(10, hits - start))
            docs = [_make_doc(start + i) for i in range(count)]
            return PageSuccess(
                page=page,
                total_hits=hits,
                records=docs,
                body=_make_body(docs, hits),
            )

        client = Mock(spec=ArticleSearchClient)
        client.fetch_page.side_effect = fetch_page
        return client
    return make_client
