"""
Process Routes - Remote Filter Invocation
=========================================

This module exposes the external attribute filter to authentication hosts
that run their pipeline in another process.

Security Model:
---------------
1. When INTERNAL_SHARED_SECRET is configured, every request must carry it
   in the X-Internal-Secret header
2. The pipeline state is processed as submitted and returned enriched

Endpoints:
----------
- POST /process: Run the filter on a pipeline state
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from ..config import get_settings
from ..exceptions import (
    DecodeError,
    FetchError,
    InvalidPathError,
    MissingParameterError,
    PreconditionError,
)
from ..filters import ExternalAttributeFilter
from ..models import ProcessRequest, ProcessResponse

logger = logging.getLogger(__name__)

# Create router
process_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def verify_internal_secret(x_internal_secret: Optional[str] = Header(None)) -> None:
    """
    Dependency that ensures requests include the expected internal secret.

    Raises:
        HTTPException: If a secret is configured and the header does not match
    """
    expected = get_settings().INTERNAL_SHARED_SECRET
    if not expected:
        return
    if not x_internal_secret or not secrets.compare_digest(x_internal_secret, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid internal secret",
        )


def get_attribute_filter(request: Request) -> ExternalAttributeFilter:
    """
    Dependency to get the configured filter from app state.

    Raises:
        HTTPException: If the filter was not initialized
    """
    attribute_filter = getattr(request.app.state, "attribute_filter", None)
    if attribute_filter is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Attribute filter not initialized",
        )
    return attribute_filter


# ============================================================================
# Endpoints
# ============================================================================

@process_router.post(
    "/process",
    response_model=ProcessResponse,
    dependencies=[Depends(verify_internal_secret)],
)
def process_state(
    payload: ProcessRequest,
    attribute_filter: ExternalAttributeFilter = Depends(get_attribute_filter),
) -> ProcessResponse:
    """
    Run the external attribute filter on a pipeline state.

    Flow:
    1. Verify the internal secret (done by dependency)
    2. Run the filter on the submitted state
    3. Return the enriched state

    Raises:
        HTTPException: 422 for unusable state, 502 for origin failures
    """
    state = payload.state

    try:
        attribute_filter.process(state)

    except (PreconditionError, MissingParameterError) as e:
        logger.warning(f"Rejected pipeline state: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    except (FetchError, DecodeError, InvalidPathError) as e:
        logger.error(f"External origin failure: {e}", extra={"error_type": type(e).__name__})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    logger.info(
        "Processed pipeline state",
        extra={"attribute_count": len(state["Attributes"])},
    )
    return ProcessResponse(state=state)
