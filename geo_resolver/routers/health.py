"""Health check endpoints"""

from fastapi import APIRouter, Depends

from geo_resolver.dependencies import get_location_service
from geo_resolver.services.location import LocationService

router = APIRouter()


@router.get("/healthz")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "geo-resolver-api"}


@router.get("/readyz")
async def readiness_check(service: LocationService = Depends(get_location_service)):
    """Readiness check listing the provider chain"""
    return {
        "status": "ready",
        "service": "geo-resolver-api",
        "providers": [
            {
                "source": adapter.source.value,
                "name": adapter.name,
                "configured": adapter.is_configured,
                "eligible": not adapter.metered or service.quota.is_eligible(adapter.source.value),
            }
            for adapter in service.adapters
        ],
    }
