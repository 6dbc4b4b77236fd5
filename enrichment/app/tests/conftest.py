"""
Shared fixtures for the enrichment tests.

External origins are served by httpx.MockTransport so no test touches the
network.
"""

import json
from typing import Callable, Dict, List

import httpx
import pytest

from enrichment.app.config import get_settings
from enrichment.app.filters import HTTPFetcher


USERS_URL = "https://fakerapi.it/api/v1/users?_quantity=1&_seed=1&_locale=es_ES"
WRONG_URL = "https://127.0.0.1:8080/wrong"
HTML_URL = "https://www.google.es"

USERS_DOCUMENT = {
    "status": "OK",
    "code": 200,
    "total": 1,
    "data": [
        {
            "id": 1,
            "uuid": "9f0e4b2c-5d1a-3c8e-a1b7-2e6f0d4c9a31",
            "firstname": "Zoe",
            "lastname": "Piñeiro",
            "username": "zpineiro",
            "email": "zoe.pineiro@example.es",
            "website": "http://example.es",
            "active": True,
        }
    ],
}


def origin_handler(request: httpx.Request) -> httpx.Response:
    """Answer like the real origins used by the scenarios."""
    if request.url.host == "fakerapi.it":
        return httpx.Response(200, json=USERS_DOCUMENT)
    if request.url.host == "www.google.es":
        return httpx.Response(
            200,
            text="<!doctype html><html><body>Google</body></html>",
            headers={"Content-Type": "text/html"},
        )
    raise httpx.ConnectError("Connection refused", request=request)


@pytest.fixture
def requests_seen() -> List[httpx.Request]:
    """Requests received by the mock origins, in order"""
    return []


@pytest.fixture
def make_fetcher(requests_seen) -> Callable[..., HTTPFetcher]:
    """Build a fetcher whose client is served by a handler function"""
    clients = []

    def _make(handler: Callable[[httpx.Request], httpx.Response] = origin_handler) -> HTTPFetcher:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(recording_handler))
        clients.append(client)
        return HTTPFetcher(client=client)

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def fetcher(make_fetcher) -> HTTPFetcher:
    """Fetcher answering like the scenario origins"""
    return make_fetcher()


@pytest.fixture
def json_handler() -> Callable[[Dict], Callable[[httpx.Request], httpx.Response]]:
    """Build a handler answering every request with the same JSON document"""

    def _make(document) -> Callable[[httpx.Request], httpx.Response]:
        body = json.dumps(document)
        return lambda request: httpx.Response(
            200, content=body, headers={"Content-Type": "application/json"}
        )

    return _make


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; reload them around every test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
