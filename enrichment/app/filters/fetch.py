"""
HTTP access to external origins.

This module handles:
- Composing request URLs with extra query parameters
- Fetching response bodies with a single GET per call
- Reporting every transport or status failure as a FetchError
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from ..exceptions import FetchError
from ..models import FetchContext

logger = logging.getLogger(__name__)


class HTTPFetcher:
    """
    Thin wrapper around an ``httpx.Client`` for fetching origin documents.

    A fetcher created without a client owns the one it creates and closes
    it in ``close()``. An injected client is left to its owner.
    """

    def __init__(self, client: Optional[httpx.Client] = None, verify: bool = True):
        self._owns_client = client is None
        # TLS verification is a client-level setting in httpx
        self._client = client if client is not None else httpx.Client(verify=verify)

    def __enter__(self) -> "HTTPFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    @staticmethod
    def add_url_parameters(url: str, parameters: Mapping[str, Any]) -> str:
        """
        Add query parameters to a URL, keeping its existing query string.

        Parameters already present in the URL are overridden by the new
        values. List values become repeated parameters.

        Args:
            url: Base URL, possibly with a query string
            parameters: Query parameter name -> value (str or list of str)

        Returns:
            The URL with the merged query string
        """
        if not parameters:
            return url
        return str(httpx.URL(url).copy_merge_params(dict(parameters)))

    def fetch(self, url: str, context: Optional[FetchContext] = None) -> str:
        """
        GET ``url`` and return the response body as text.

        Args:
            url: Fully resolved URL
            context: Request options forwarded to the client

        Returns:
            Response body

        Raises:
            FetchError: If the request fails for any reason, including
                non-2xx responses. The cause is logged, not propagated.
        """
        context = context or FetchContext()
        timeout = httpx.Timeout(context.timeout, connect=context.connect_timeout)

        try:
            response = self._client.get(
                url,
                headers=context.headers,
                timeout=timeout,
                follow_redirects=context.follow_redirects,
            )
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                f"Fetching external origin failed: {e}",
                extra={"url": url, "error_type": type(e).__name__},
            )
            raise FetchError(
                f"ExternalAttributeFilter: failed to fetch {url!r}",
                url=url,
            ) from None

        logger.debug(
            f"Fetched external origin {url}",
            extra={"status_code": response.status_code, "content_length": len(response.content)},
        )
        return response.text
