"""
Unit tests for ArticleSearchClient.

The requests Session is mocked; responses are real requests.Response
objects built by the response_factory fixture. No live API calls occur.
"""

from unittest.mock import Mock

import pytest
import requests
from requests.adapters import HTTPAdapter

from nyt_harvest.config import AppConfig
from nyt_harvest.exceptions import TransportError, MalformedResponseError
from nyt_harvest.models import SearchQuery, PageSuccess, PageFailure
from nyt_harvest.services.search_client import (
    ArticleSearchClient,
    build_search_url,
    create_session,
    parse_search_body,
)


BASE_URL = "https://api.nytimes.com/svc/search/v2/articlesearch.json"


@pytest.fixture
def query():
    return SearchQuery(api_key='abc123', fq='kicker:("Modern Love")')


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


class TestBuildSearchUrl:
    """Test query-string construction."""

    def test_keeps_pre_encoded_quotes(self):
        url = build_search_url(BASE_URL, {'api-key': 'k', 'fq': 'kicker:(%22Modern Love%22)', 'page': 2})

        assert url == f"{BASE_URL}?api-key=k&fq=kicker:(%22Modern%20Love%22)&page=2"

    def test_does_not_double_encode_percent(self):
        url = build_search_url(BASE_URL, {'fq': '%22x%22'})

        assert '%2522' not in url


class TestParseSearchBody:
    """Test extraction of hits and documents."""

    def test_returns_hits_and_docs(self, body_factory, doc_factory):
        docs = [doc_factory(0), doc_factory(1)]

        hits, parsed = parse_search_body(body_factory(docs, 613))

        assert hits == 613
        assert parsed == docs

    def test_null_docs_is_empty(self):
        hits, docs = parse_search_body({'response': {'meta': {'hits': 0}, 'docs': None}})

        assert hits == 0
        assert docs == []

    @pytest.mark.parametrize('body', [
        None,
        [],
        {},
        {'response': None},
        {'response': {'docs': []}},
        {'response': {'meta': {}, 'docs': []}},
        {'response': {'meta': {'hits': '613'}, 'docs': []}},
        {'response': {'meta': {'hits': True}, 'docs': []}},
        {'response': {'meta': {'hits': -1}, 'docs': []}},
        {'response': {'meta': {'hits': 10}, 'docs': {'a': 1}}},
        {'response': {'meta': {'hits': 10}, 'docs': ['not a document']}},
    ])
    def test_malformed_bodies(self, body):
        with pytest.raises(MalformedResponseError):
            parse_search_body(body)


class TestFetchPage:
    """Test outcome classification of a page request."""

    def test_success(self, session, query, response_factory, body_factory, doc_factory):
        body = body_factory([doc_factory(0)], 613)
        session.get.return_value = response_factory(200, body)
        client = ArticleSearchClient(base_url=BASE_URL, timeout=5, session=session)

        result = client.fetch_page(query.with_page(4))

        assert isinstance(result, PageSuccess)
        assert result.page == 4
        assert result.total_hits == 613
        assert len(result.records) == 1
        assert result.body == body

    def test_sends_page_and_timeout(self, session, query, response_factory, body_factory):
        session.get.return_value = response_factory(200, body_factory([], 0))
        client = ArticleSearchClient(base_url=BASE_URL, timeout=5, session=session)

        client.fetch_page(query.with_page(7))

        args, kwargs = session.get.call_args
        assert args[0].startswith(BASE_URL + '?')
        assert 'page=7' in args[0]
        assert 'fq=kicker:(%22Modern%20Love%22)' in args[0]
        assert kwargs['timeout'] == 5

    def test_unset_page_is_zero(self, session, query, response_factory, body_factory):
        session.get.return_value = response_factory(200, body_factory([], 0))
        client = ArticleSearchClient(session=session)

        assert client.fetch_page(query).page == 0

    def test_non_200_is_page_failure(self, session, query, response_factory):
        session.get.return_value = response_factory(403, reason='Forbidden')
        client = ArticleSearchClient(session=session)

        result = client.fetch_page(query.with_page(59))

        assert isinstance(result, PageFailure)
        assert result.page == 59
        assert result.status_code == 403
        assert result.reason == 'Forbidden'

    def test_connection_error_is_transport_error(self, session, query):
        session.get.side_effect = requests.exceptions.ConnectionError("connection refused")
        client = ArticleSearchClient(session=session)

        with pytest.raises(TransportError, match="page 0"):
            client.fetch_page(query)

    def test_timeout_is_transport_error(self, session, query):
        session.get.side_effect = requests.exceptions.Timeout("read timed out")
        client = ArticleSearchClient(session=session)

        with pytest.raises(TransportError):
            client.fetch_page(query)

    def test_invalid_json_is_malformed(self, session, query, response_factory):
        session.get.return_value = response_factory(200, raw=b'<html>oops</html>')
        client = ArticleSearchClient(session=session)

        with pytest.raises(MalformedResponseError, match="not valid JSON"):
            client.fetch_page(query)


class TestClientLifecycle:
    """Test construction and cleanup."""

    def test_from_config(self):
        config = AppConfig(search_url='https://example.test/search', request_timeout_sec=12)

        client = ArticleSearchClient.from_config(config)

        assert client.base_url == 'https://example.test/search'
        assert client.timeout == 12
        client.close()

    def test_context_manager_closes_session(self, session):
        with ArticleSearchClient(session=session):
            pass

        session.close.assert_called_once()

    def test_create_session_mounts_retry_adapter(self):
        session = create_session(retries=4, backoff_factor=0.1)

        adapter = session.get_adapter('https://api.nytimes.com')

        assert isinstance(adapter, HTTPAdapter)
        assert adapter.max_retries.total == 4
        assert 503 in adapter.max_retries.status_forcelist
        assert 403 not in adapter.max_retries.status_forcelist
        session.close()
