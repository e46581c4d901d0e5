"""Pydantic schemas for the distance endpoint"""

from typing import Optional, Tuple
from pydantic import BaseModel, Field

from geo_resolver.errors import InvalidInputError
from geo_resolver.providers.base import Coordinates
from geo_resolver.schemas.common import Point


class DistanceRequest(BaseModel):
    """Request schema for distance resolution"""
    originLat: Optional[float] = Field(None, description="Origin latitude")
    originLng: Optional[float] = Field(None, description="Origin longitude")
    destLat: Optional[float] = Field(None, description="Destination latitude")
    destLng: Optional[float] = Field(None, description="Destination longitude")

    def to_points(self) -> Tuple[Coordinates, Coordinates]:
        """Validated origin and destination; raises InvalidInputError"""
        missing = [
            name for name in ("originLat", "originLng", "destLat", "destLng")
            if getattr(self, name) is None
        ]
        if missing:
            raise InvalidInputError(f"Origin and destination coordinates are required (missing: {', '.join(missing)})")
        return (
            Coordinates(self.originLat, self.originLng),
            Coordinates(self.destLat, self.destLng),
        )


class DistanceData(BaseModel):
    distance: float = Field(..., description="Distance in km, 2 decimal places")
    duration: Optional[int] = Field(None, description="Travel time in seconds (road providers only)")
    source: str = Field(..., description="primary, secondary or mathematical")
    unit: str = "km"
    warning: Optional[str] = None


class DistanceCoordinates(BaseModel):
    origin: Point
    destination: Point


class DistanceMeta(BaseModel):
    coordinates: DistanceCoordinates
    source: str
    is_google_maps: bool
    quota_message: Optional[str] = None


class DistanceResponse(BaseModel):
    success: bool = True
    data: DistanceData
    message: Optional[str] = None
    meta: DistanceMeta
