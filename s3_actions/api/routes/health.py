"""
Health check endpoint.

Liveness only: the service holds no connections of its own, so there
is nothing further to check before serving traffic. Storage reachability
depends on the credentials each call brings.
"""

import logging
from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel

from ... import __version__
from ..dependencies import SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """
    Health check response.

    Standardized format makes it easy for monitoring tools to parse.
    """
    status: str
    version: str
    details: dict[str, Any] = {}


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not contact storage.",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """Liveness check, plus any configuration problems found at startup."""
    missing = settings.validate_required_fields()
    if missing:
        logger.warning("Health check found missing settings", extra={"missing_fields": missing})

    return HealthResponse(
        status="ok" if not missing else "degraded",
        version=__version__,
        details={
            "api_version": settings.api_version,
            "missing_settings": missing,
        }
    )
