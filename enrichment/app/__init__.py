"""
Attribute Enrichment Package

Adds or replaces the attributes of an authenticated user with values
fetched from external HTTP/JSON origins.

Modules:
- filters: ExternalAttributeFilter and its helpers
- config: Settings loaded from the environment
- exceptions: Error taxonomy of the filter
- models: Origin specification, fetch context and API payloads
- process: HTTP endpoint running the filter for out-of-process hosts
- main: FastAPI application factory
"""

from .exceptions import (
    ConfigurationError,
    DecodeError,
    ExternalAttributeError,
    FetchError,
    InvalidPathError,
    MissingParameterError,
    PreconditionError,
)
from .filters import ExternalAttributeFilter, HTTPFetcher, ProcessingFilter

__all__ = [
    "ExternalAttributeFilter",
    "HTTPFetcher",
    "ProcessingFilter",
    "ExternalAttributeError",
    "ConfigurationError",
    "MissingParameterError",
    "FetchError",
    "DecodeError",
    "InvalidPathError",
    "PreconditionError",
]
