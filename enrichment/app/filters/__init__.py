"""
Filters Package

This package contains the processing filters run on the attributes of an
authenticated user.

Modules:
- base: ProcessingFilter contract shared by all filters
- external: ExternalAttributeFilter, enriching attributes from HTTP/JSON origins
- origin: Declarative validation of origin configuration
- parameters: Request URL composition from attribute values
- fetch: HTTP client wrapper for external origins
- decode: JSON decoding of origin responses
- flatten: Dot-joined path flattening and lookup
"""

from .base import ProcessingFilter
from .external import ExternalAttributeFilter, merge_attribute
from .fetch import HTTPFetcher

__all__ = [
    "ProcessingFilter",
    "ExternalAttributeFilter",
    "HTTPFetcher",
    "merge_attribute",
]
