"""API routes for Slidemark."""

from fastapi import APIRouter

from slidemark.api.routes.health import router as health_router
from slidemark.api.routes.render import router as render_router
from slidemark.api.routes.samples import router as samples_router

# Main API router
api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(render_router, prefix="/render", tags=["Render"])
api_router.include_router(samples_router, prefix="/samples", tags=["Samples"])

__all__ = ["api_router"]
