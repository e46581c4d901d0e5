"""Pydantic schemas for geocoding endpoints"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class GeocodeRequest(BaseModel):
    """Request schema for forward geocoding

    ``address`` is optional at the schema level so that an empty or missing
    address is rejected with the service's own error message.
    """
    model_config = ConfigDict(populate_by_name=True)

    address: Optional[str] = Field(None, description="Free-text address")
    company_name: Optional[str] = Field(
        None, alias="companyName", description="Company name hint that improves match quality"
    )


class AddressComponentsOut(BaseModel):
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    subdistrict: Optional[str] = None
    postcode: Optional[str] = None
    road: Optional[str] = None
    house_number: Optional[str] = None


class GeocodeCandidate(BaseModel):
    """One ranked location"""
    lat: float = Field(..., description="Latitude (WGS84 degrees)")
    lng: float = Field(..., description="Longitude (WGS84 degrees)")
    formatted_address: str
    address_components: AddressComponentsOut
    match_level: str = Field(..., description="exact, full_address, district_province, province_only or partial")
    confidence: float = Field(..., ge=0.0, le=1.0)
    final_score: float = Field(..., description="Rank key; candidates are sorted by it, descending")
    source: str = Field(..., description="primary, secondary or mathematical")
    place_id: Optional[str] = None
    place_type: Optional[str] = None


class GeocodeMeta(BaseModel):
    source: str
    is_google_maps: bool
    quota_message: str
    warnings: List[str] = Field(default_factory=list)


class GeocodeResponse(BaseModel):
    """Ranked candidates; the first one is the recommended result"""
    success: bool = True
    data: List[GeocodeCandidate]
    message: Optional[str] = None
    meta: GeocodeMeta
