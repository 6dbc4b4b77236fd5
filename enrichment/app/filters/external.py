"""
External Attribute Filter
=========================

Adds or replaces attributes with values fetched from external HTTP/JSON
origins.

For every configured attribute, in configuration order:
1. Build the request URL, filling parameters from existing attributes
2. Fetch the origin document (one attempt, no retries)
3. Decode it as JSON and flatten it to dot-joined paths
4. Take the value at the configured jsonpath
5. Replace the attribute, or append to it

Any failure aborts the whole call. Attributes merged before the failure stay
merged in the caller's state.

Example:
--------
    filter = ExternalAttributeFilter({
        "username": {
            "url": "https://directory.example.org/api/users",
            "jsonpath": "data.0.username",
            "parameters": {"email": "mail"},
        },
    })
    filter.process(state)
"""

import logging
from typing import Any, Dict, Mapping, Optional

from ..config import get_settings
from ..exceptions import PreconditionError
from ..models import AttributeValue, FetchContext, OriginSpec
from .base import ProcessingFilter
from .decode import decode_response
from .fetch import HTTPFetcher
from .flatten import flatten, lookup_path
from .origin import parse_filter_config
from .parameters import build_request_url

logger = logging.getLogger(__name__)


class ExternalAttributeFilter(ProcessingFilter):
    """
    Processing filter enriching attributes from external origins.

    Attributes:
        attributes_to_add: Attribute name -> OriginSpec, in configuration order
        context: Request options forwarded to the HTTP client
    """

    def __init__(
        self,
        config: Dict[str, Any],
        reserved: Optional[Any] = None,
        *,
        fetcher: Optional[HTTPFetcher] = None,
        context: Optional[FetchContext] = None,
    ):
        """
        Initialize the filter.

        Args:
            config: Attribute name -> origin block
            reserved: For future use
            fetcher: HTTP collaborator; a private one is created if omitted
            context: Request options; built from settings if omitted

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        super().__init__(config, reserved)

        self.attributes_to_add: Dict[str, OriginSpec] = parse_filter_config(config)
        self.context = context if context is not None else get_settings().fetch_context()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher if fetcher is not None else HTTPFetcher(verify=self.context.verify)

        logger.debug(
            f"Configured external origins for {len(self.attributes_to_add)} attribute(s)",
            extra={"attributes": list(self.attributes_to_add)},
        )

    def process(self, state: Dict[str, Any]) -> None:
        """
        Add or replace attributes with values from their external origins.

        Args:
            state: Pipeline state; ``state["Attributes"]`` is changed in place

        Raises:
            PreconditionError: If the state has no Attributes mapping
            MissingParameterError: If a parameter references an absent attribute
            FetchError: If an origin cannot be fetched
            DecodeError: If an origin response is not JSON
            InvalidPathError: If a jsonpath is not in the response
        """
        if "Attributes" not in state:
            raise PreconditionError("ExternalAttributeFilter: state has no 'Attributes'")

        attributes = state["Attributes"]
        if not isinstance(attributes, Mapping):
            raise PreconditionError("ExternalAttributeFilter: state 'Attributes' should be a mapping")

        for name, origin in self.attributes_to_add.items():
            value = self.fetch_information(origin, attributes)
            merge_attribute(attributes, name, value, origin.replace)

    def fetch_information(self, origin: OriginSpec, attributes: Dict[str, AttributeValue]) -> str:
        """
        Fetch an origin document and return the value at its jsonpath.

        Args:
            origin: Origin to fetch
            attributes: Current attribute set, used for URL parameters

        Returns:
            Value found at ``origin.jsonpath``
        """
        url = build_request_url(origin.url, origin.parameters, attributes, self.fetcher)
        body = self.fetcher.fetch(url, self.context)
        document = decode_response(body, url)
        return lookup_path(flatten(document), origin.jsonpath)

    def close(self) -> None:
        """Release the HTTP client created by this filter, if any."""
        if self._owns_fetcher:
            self.fetcher.close()


def merge_attribute(
    attributes: Dict[str, AttributeValue],
    name: str,
    value: str,
    replace: bool,
) -> None:
    """
    Merge a fetched value into the attribute set.

    The attribute is set to ``[value]`` when replacing or when it does not
    exist yet; otherwise ``value`` is appended to the existing values.
    """
    if replace or name not in attributes:
        attributes[name] = [value]
        action = "replaced" if replace else "added"
    else:
        existing = attributes[name]
        values = [existing] if isinstance(existing, str) else list(existing)
        values.append(value)
        attributes[name] = values
        action = "appended"

    logger.debug(f"Attribute {name} {action} from external origin", extra={"attribute": name})
