"""
Unit Tests for Fetching and Decoding
====================================

Test Coverage:
--------------
1. Response body returned as text
2. Fetch context forwarded to the HTTP client
3. Transport errors, invalid URLs and error statuses reported as FetchError
4. Exactly one attempt per fetch
5. JSON decoding and DecodeError classification
"""

import logging

import httpx
import pytest

from enrichment.app.exceptions import DecodeError, FetchError
from enrichment.app.filters import HTTPFetcher
from enrichment.app.filters.decode import decode_response
from enrichment.app.models import FetchContext

from .conftest import HTML_URL, USERS_DOCUMENT, USERS_URL, WRONG_URL


# ============================================================================
# Fetch Tests
# ============================================================================

def test_fetch_returns_body(fetcher):
    body = fetcher.fetch(USERS_URL)
    assert "zpineiro" in body


def test_fetch_sends_context_headers(fetcher, requests_seen):
    context = FetchContext(headers={"User-Agent": "attribute-enrichment/test", "X-Tenant": "es"})

    fetcher.fetch(USERS_URL, context)

    assert len(requests_seen) == 1
    request = requests_seen[0]
    assert request.method == "GET"
    assert str(request.url) == USERS_URL
    assert request.headers["User-Agent"] == "attribute-enrichment/test"
    assert request.headers["X-Tenant"] == "es"


def test_fetch_applies_context_timeouts(fetcher, requests_seen):
    fetcher.fetch(USERS_URL, FetchContext(timeout=3.0, connect_timeout=1.0))

    timeout = requests_seen[0].extensions["timeout"]
    assert timeout["connect"] == 1.0
    assert timeout["read"] == 3.0


def test_unreachable_url(fetcher, requests_seen):
    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch(WRONG_URL)

    assert str(exc_info.value) == f"ExternalAttributeFilter: failed to fetch '{WRONG_URL}'"
    assert exc_info.value.url == WRONG_URL
    assert len(requests_seen) == 1


def test_transport_detail_is_logged_not_raised(fetcher, caplog):
    with caplog.at_level(logging.WARNING, logger="enrichment.app.filters.fetch"):
        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch(WRONG_URL)

    assert "Connection refused" not in str(exc_info.value)
    assert exc_info.value.__cause__ is None
    assert "Connection refused" in caplog.text


def test_timeout_is_a_fetch_error(make_fetcher, requests_seen):
    def slow_origin(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(FetchError, match="failed to fetch"):
        make_fetcher(slow_origin).fetch(USERS_URL)

    assert len(requests_seen) == 1


@pytest.mark.parametrize("status_code", [404, 500, 503])
def test_error_status_is_a_fetch_error(make_fetcher, requests_seen, status_code):
    fetcher = make_fetcher(lambda request: httpx.Response(status_code, json={"error": "x"}))

    with pytest.raises(FetchError, match="failed to fetch"):
        fetcher.fetch(USERS_URL)

    # No retry on server errors
    assert len(requests_seen) == 1


def test_url_rejected_by_client(fetcher):
    with pytest.raises(FetchError, match="failed to fetch 'xxx'"):
        fetcher.fetch("xxx")


def test_owned_client_is_closed():
    fetcher = HTTPFetcher()
    fetcher.close()
    assert fetcher._client.is_closed


def test_injected_client_is_left_open():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    with HTTPFetcher(client=client):
        pass

    assert not client.is_closed
    client.close()


# ============================================================================
# Decode Tests
# ============================================================================

def test_decode_json_document():
    assert decode_response('{"data": [{"username": "zpineiro"}]}', USERS_URL) == {
        "data": [{"username": "zpineiro"}]
    }


def test_decode_json_array():
    assert decode_response("[1, 2]", USERS_URL) == [1, 2]


@pytest.mark.parametrize("body", ["<!doctype html><html></html>", "", "{unquoted: 1}"])
def test_decode_invalid_body(body):
    with pytest.raises(DecodeError) as exc_info:
        decode_response(body, HTML_URL)

    assert str(exc_info.value) == f"ExternalAttributeFilter: failed to decode response from '{HTML_URL}'"
    assert exc_info.value.url == HTML_URL


@pytest.mark.parametrize("body", ["null", "42", '"zpineiro"', "true"])
def test_decode_scalar_document(body):
    with pytest.raises(DecodeError, match="failed to decode response"):
        decode_response(body, USERS_URL)


def test_fetched_document_decodes(fetcher):
    assert decode_response(fetcher.fetch(USERS_URL), USERS_URL) == USERS_DOCUMENT
