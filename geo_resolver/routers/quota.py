"""Quota status endpoint"""

from fastapi import APIRouter, Depends

from geo_resolver.auth import verify_api_key
from geo_resolver.dependencies import get_location_service
from geo_resolver.schemas.quota import QuotaStatusResponse
from geo_resolver.services.location import LocationService

router = APIRouter()


@router.get("", response_model=QuotaStatusResponse)
async def quota_status(
    service: LocationService = Depends(get_location_service),
    api_key: str = Depends(verify_api_key)
):
    """Per-provider usage in the current quota window"""
    return QuotaStatusResponse(data=service.quota_status())
