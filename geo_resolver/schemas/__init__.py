"""Pydantic schemas for API requests and responses"""

from .common import ErrorResponse, Point
from .geocoding import (
    GeocodeRequest, GeocodeResponse, GeocodeCandidate, GeocodeMeta, AddressComponentsOut
)
from .distance import DistanceRequest, DistanceResponse, DistanceData, DistanceMeta, DistanceCoordinates
from .quota import ProviderQuotaStatus, QuotaStatusResponse

__all__ = [
    "ErrorResponse", "Point",
    "GeocodeRequest", "GeocodeResponse", "GeocodeCandidate", "GeocodeMeta", "AddressComponentsOut",
    "DistanceRequest", "DistanceResponse", "DistanceData", "DistanceMeta", "DistanceCoordinates",
    "ProviderQuotaStatus", "QuotaStatusResponse",
]
