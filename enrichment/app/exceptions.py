"""
Exceptions for the external attribute filter.

Configuration problems are reported while the filter is being constructed.
Everything else is raised from ``process`` and aborts the current request:
- MissingParameterError: a URL parameter references an absent attribute
- FetchError: the external origin could not be fetched
- DecodeError: the origin did not answer with a JSON document
- InvalidPathError: the configured jsonpath is not in the response
- PreconditionError: the pipeline state has no ``Attributes``
"""

from typing import Optional


class ExternalAttributeError(Exception):
    """Base exception for all external attribute filter errors"""
    pass


class ConfigurationError(ExternalAttributeError):
    """Invalid filter configuration, raised at construction time only."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingParameterError(ExternalAttributeError):
    """A URL parameter references an attribute the request does not carry."""

    def __init__(self, message: str, attribute: str):
        super().__init__(message)
        self.attribute = attribute


class FetchError(ExternalAttributeError):
    """The HTTP request to an external origin failed."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class DecodeError(ExternalAttributeError):
    """The external origin answered with something that is not JSON."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class InvalidPathError(ExternalAttributeError):
    """The configured jsonpath is absent from the flattened response."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class PreconditionError(ExternalAttributeError):
    """The pipeline state handed to the filter is unusable."""
    pass


__all__ = [
    "ExternalAttributeError",
    "ConfigurationError",
    "MissingParameterError",
    "FetchError",
    "DecodeError",
    "InvalidPathError",
    "PreconditionError",
]
