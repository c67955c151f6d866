"""API v1 router configuration."""

from fastapi import APIRouter

from airaware.api.v1.endpoints import environment, health

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(environment.router, prefix="/environment", tags=["Environment"])
