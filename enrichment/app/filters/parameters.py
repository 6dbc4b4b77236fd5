"""
Request URL composition from existing attribute values.

An origin's ``parameters`` map query parameter names to attribute names.
The empty parameter name is special: its value is appended to the URL path
as one percent-encoded segment instead of going into the query string.
"""

from typing import Dict, List, Mapping, Optional, Union
from urllib.parse import quote, urlsplit, urlunsplit

from ..exceptions import MissingParameterError
from ..models import AttributeValue

# Parameter name whose value is appended to the URL path
PATH_PARAMETER = ""


def resolve_parameters(
    parameters: Mapping[str, str],
    attributes: Mapping[str, AttributeValue],
) -> Dict[str, AttributeValue]:
    """
    Look up the attribute referenced by every parameter.

    Args:
        parameters: Query parameter name -> attribute name
        attributes: Current attribute set

    Returns:
        Query parameter name -> attribute value

    Raises:
        MissingParameterError: If a referenced attribute is absent
    """
    resolved: Dict[str, AttributeValue] = {}
    for query_name, attribute_name in parameters.items():
        if attribute_name not in attributes:
            raise MissingParameterError(
                f"ExternalAttributeFilter: missing attribute {attribute_name!r} "
                f"for parameter {query_name!r}",
                attribute=attribute_name,
            )
        resolved[query_name] = attributes[attribute_name]
    return resolved


def append_path_segments(url: str, value: AttributeValue) -> str:
    """Append each value as an encoded path segment, before any query string."""
    segments: List[str] = [value] if isinstance(value, str) else list(value)
    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    for segment in segments:
        path += "/" + quote(segment, safe="")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def build_request_url(
    url: str,
    parameters: Optional[Mapping[str, str]],
    attributes: Mapping[str, AttributeValue],
    fetcher,
) -> str:
    """
    Build the URL to fetch for one origin.

    Without parameters the configured URL is returned verbatim.

    Args:
        url: Configured origin URL
        parameters: Origin parameters, or None
        attributes: Current attribute set
        fetcher: HTTP collaborator providing ``add_url_parameters``

    Returns:
        Fully resolved URL
    """
    if not parameters:
        return url

    query: Dict[str, Union[str, List[str]]] = resolve_parameters(parameters, attributes)
    if PATH_PARAMETER in query:
        url = append_path_segments(url, query.pop(PATH_PARAMETER))

    return fetcher.add_url_parameters(url, query)
