"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    auth: str
    database: str
    media: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(settings: Settings = Depends(get_settings)):
    """
    Readiness check endpoint.

    Reports which required settings are present; returns 503 while the
    signing secret or the database connection is missing. Media upload is
    optional and never blocks readiness.
    """
    auth = "configured" if settings.jwt_secret else "missing"
    database = (
        "configured"
        if settings.supabase_url and settings.supabase_service_role_key
        else "missing"
    )
    media = (
        "configured"
        if settings.cloudinary_cloud_name
        and settings.cloudinary_api_key
        and settings.cloudinary_api_secret
        else "missing"
    )
    ready = auth == "configured" and database == "configured"
    body = ReadinessResponse(
        status="ready" if ready else "not_ready",
        auth=auth,
        database=database,
        media=media,
    )
    if not ready:
        logger.warning(f"Readiness check failed: auth={auth}, database={database}")
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
