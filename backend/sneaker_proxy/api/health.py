"""Health and liveness routes."""

from fastapi import APIRouter, Depends

from sneaker_proxy.api.deps import get_cache
from sneaker_proxy.api.schemas import HealthResponse
from sneaker_proxy.services.cache import CacheService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(cache: CacheService = Depends(get_cache)):
    """Liveness plus cache occupancy (stale entries included until read)."""
    return HealthResponse(status="ok", cache_size=len(cache))


@router.get("/test")
async def liveness():
    return {"status": "ok", "message": "sneaker proxy is running"}
