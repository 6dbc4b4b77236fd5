"""
Validation of external origin configuration.

Every recognized origin field has an entry in ``ORIGIN_SCHEMA`` mapping it to
a validator. A block is checked field by field in its own order; the first
unknown or malformed field stops validation with a ConfigurationError.
"""

from typing import Any, Callable, Dict, Mapping

from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..exceptions import ConfigurationError
from ..models import OriginSpec
from .base import PRIORITY_OPTION

_url_adapter = TypeAdapter(AnyUrl)

# Fields every origin must define
REQUIRED_FIELDS = ("url", "jsonpath")


def _validate_url(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(
            f"url should be a non-empty string, got {value!r}", field="url"
        )
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ConfigurationError(
            f"{value!r} is not a valid RFC2396 compliant URL", field="url"
        ) from None
    return value


def _validate_replace(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError("replace should be boolean", field="replace")
    return value


def _validate_jsonpath(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(
            f"jsonpath should be a non-empty string, got {value!r}", field="jsonpath"
        )
    return value


def _validate_parameters(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            "parameters should be an associative array", field="parameters"
        )
    for query_name, attribute_name in value.items():
        if not isinstance(query_name, str):
            raise ConfigurationError(
                "parameters should be an associative array", field="parameters"
            )
        if not isinstance(attribute_name, str) or not attribute_name:
            raise ConfigurationError(
                f"parameter {query_name!r} should name an attribute, got {attribute_name!r}",
                field="parameters",
            )
    return dict(value)


ORIGIN_SCHEMA: Dict[str, Callable[[Any], Any]] = {
    "url": _validate_url,
    "replace": _validate_replace,
    "jsonpath": _validate_jsonpath,
    "parameters": _validate_parameters,
}


def parse_origin(origin: Any) -> OriginSpec:
    """
    Validate one origin block and build its OriginSpec.

    Args:
        origin: Raw configuration for one attribute

    Returns:
        Immutable OriginSpec

    Raises:
        ConfigurationError: If the block is not a mapping, has an unknown
            field, a malformed field, or lacks a required field
    """
    if not isinstance(origin, Mapping):
        raise ConfigurationError("external origin should be an array")

    fields: Dict[str, Any] = {}
    for name, value in origin.items():
        validator = ORIGIN_SCHEMA.get(name)
        if validator is None:
            raise ConfigurationError(f"Unknown flag in origin: {name!r}", field=name)
        fields[name] = validator(value)

    for name in REQUIRED_FIELDS:
        if name not in fields:
            raise ConfigurationError(f"origin is missing required field {name!r}", field=name)

    return OriginSpec(**fields)


def parse_filter_config(config: Any) -> Dict[str, OriginSpec]:
    """
    Validate the whole filter configuration.

    Args:
        config: Attribute name -> origin block; ``%priority`` is skipped

    Returns:
        Attribute name -> OriginSpec, in declaration order

    Raises:
        ConfigurationError: If the configuration or any origin is invalid
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError("config should be an array")

    return {
        name: parse_origin(origin)
        for name, origin in config.items()
        if name != PRIORITY_OPTION
    }
