"""Health check routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from slidemark.api.config import Settings, get_settings
from slidemark.api.dependencies import get_sample_store
from slidemark.samples.store import SampleStore

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str
    samples: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    store: SampleStore = Depends(get_sample_store),
):
    """Health check with the size of the sample library."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        samples=store.count(),
    )
