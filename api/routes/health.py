"""
Module 07 - Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter

from api.deps import peek_pool
from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status for liveness probes. A halted pool reports ok=False.
    """
    pool = peek_pool()
    if pool is None:
        return HealthResponse(ok=True)
    stats = pool.state.stats()
    return HealthResponse(ok=not stats["halted"], pool=stats)


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """
    Root endpoint - same as health check.
    """
    return await health_check()
