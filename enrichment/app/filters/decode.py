"""JSON decoding of external origin responses."""

import json
import logging
from typing import Any, Dict, List, Union

from ..exceptions import DecodeError

logger = logging.getLogger(__name__)


def decode_response(body: str, url: str) -> Union[Dict[str, Any], List[Any]]:
    """
    Decode a response body fetched from ``url``.

    Only JSON objects and arrays can be flattened, so a bare scalar
    document is rejected like any other undecodable body.

    Raises:
        DecodeError: If the body is empty, not JSON, or not a container
    """
    message = f"ExternalAttributeFilter: failed to decode response from {url!r}"

    try:
        document = json.loads(body)
    except ValueError as e:
        logger.debug(f"Response from {url} is not JSON: {e}")
        raise DecodeError(message, url=url) from None

    if not isinstance(document, (dict, list)):
        logger.debug(f"Response from {url} is a JSON {type(document).__name__}, not a container")
        raise DecodeError(message, url=url)

    return document
