"""Distance endpoints"""

from typing import Optional
from fastapi import APIRouter, Depends, Query

from geo_resolver.auth import verify_api_key
from geo_resolver.dependencies import get_location_service
from geo_resolver.schemas.distance import DistanceRequest, DistanceResponse
from geo_resolver.services.location import LocationService

router = APIRouter()


@router.post("", response_model=DistanceResponse, response_model_exclude_none=True)
async def calculate_distance(
    payload: DistanceRequest,
    service: LocationService = Depends(get_location_service),
    api_key: str = Depends(verify_api_key)
):
    """
    Travel distance between two coordinates.

    Road distance and duration come from Google Maps or OSRM; when neither
    answers, a straight-line distance is returned with a ``warning``.
    """
    origin, destination = payload.to_points()
    return await service.resolve_distance(origin, destination)


@router.get("", response_model=DistanceResponse, response_model_exclude_none=True)
async def calculate_distance_get(
    originLat: Optional[float] = Query(None),
    originLng: Optional[float] = Query(None),
    destLat: Optional[float] = Query(None),
    destLng: Optional[float] = Query(None),
    service: LocationService = Depends(get_location_service),
    api_key: str = Depends(verify_api_key)
):
    """Same as POST /distance, with coordinates in the query string"""
    payload = DistanceRequest(originLat=originLat, originLng=originLng, destLat=destLat, destLng=destLng)
    origin, destination = payload.to_points()
    return await service.resolve_distance(origin, destination)
