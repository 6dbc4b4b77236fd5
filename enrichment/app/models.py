"""
Data Models Module

This module defines Pydantic models used by the external attribute filter
and by the enrichment service API.

Models are organized by functional area:
- Filter models (origin specification, HTTP fetch context)
- Service models (process request/response payloads)
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Attribute values carried through the authentication pipeline
AttributeValue = Union[str, List[str]]


# ============================================================================
# Filter Models
# ============================================================================

class OriginSpec(BaseModel):
    """
    External origin for one attribute.

    Built once when the filter is configured and immutable afterwards.
    Field values are checked by the origin schema table before the model
    is created.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Absolute URL of the external origin")
    jsonpath: str = Field(..., description="Dot-joined path into the flattened JSON response")
    replace: bool = Field(default=False, description="Replace the attribute instead of appending")
    parameters: Optional[Dict[str, str]] = Field(
        default=None,
        description="Query parameter name -> attribute supplying its value",
    )


class FetchContext(BaseModel):
    """Request options forwarded verbatim to the HTTP client."""

    model_config = ConfigDict(frozen=True)

    headers: Dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    timeout: float = Field(default=10.0, gt=0, description="Total request timeout in seconds")
    connect_timeout: float = Field(default=5.0, gt=0, description="Connect timeout in seconds")
    verify: bool = Field(default=True, description="Verify TLS certificates (applied to clients the filter creates)")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")


# ============================================================================
# Service Models
# ============================================================================

class ProcessRequest(BaseModel):
    """Pipeline state submitted to the enrichment service."""
    state: Dict[str, Any] = Field(..., description="Pipeline state, must include 'Attributes'")


class ProcessResponse(BaseModel):
    """Pipeline state after the filter ran."""
    state: Dict[str, Any] = Field(..., description="Pipeline state with enriched attributes")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(default="ok", description="Service status")
    service: str = Field(default="attribute-enrichment", description="Service name")
    configured_attributes: int = Field(default=0, description="Number of attributes with an external origin")
