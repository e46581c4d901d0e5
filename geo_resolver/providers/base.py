"""Shared provider contract and the adapter-agnostic raw result shapes"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from geo_resolver.errors import InvalidInputError
from geo_resolver.text import clean_company_name, mentions


class ProviderSource(str, Enum):
    """Data source identity, in default priority order"""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MATHEMATICAL = "mathematical"


@dataclass(frozen=True)
class Coordinates:
    """WGS84 point in degrees"""
    lat: float
    lng: float

    def __post_init__(self):
        validate_coordinates(self.lat, self.lng)

    def as_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


def validate_coordinates(lat: float, lng: float) -> None:
    """Reject anything that is not a finite WGS84 coordinate pair"""
    for name, value, bound in (("lat", lat, 90.0), ("lng", lng, 180.0)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{name} must be a number")
        if value != value or not -bound <= value <= bound:
            raise InvalidInputError(f"{name} must be between -{bound:g} and {bound:g}")


@dataclass
class AddressComponents:
    """Structured decomposition of a resolved location"""
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    subdistrict: Optional[str] = None
    postcode: Optional[str] = None
    road: Optional[str] = None
    house_number: Optional[str] = None


@dataclass
class GeocodeQuery:
    """Free-text address plus an optional company name hint"""
    address: str
    company_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.address, str) or not self.address.strip():
            raise InvalidInputError("Address is required")
        self.address = self.address.strip()
        if self.company_name is not None:
            self.company_name = self.company_name.strip() or None


def build_search_text(query: GeocodeQuery, country_name: Optional[str]) -> str:
    """Address text sent to providers

    The company name, stripped of legal-form words, leads the text unless
    the address already names it; the country is appended when absent.
    """
    text = query.address
    company = clean_company_name(query.company_name)
    if company and not mentions(text, company):
        text = f"{company}, {text}"
    if country_name and country_name.lower() not in text.lower():
        text = f"{text}, {country_name}"
    return text


@dataclass
class RawCandidate:
    """One location as returned by a provider, before scoring

    ``signal`` is the provider's own certainty in [0, 1] and ``alternatives``
    the number of interpretations it returned for the same query.
    """
    lat: float
    lng: float
    formatted_address: str
    components: AddressComponents = field(default_factory=AddressComponents)
    signal: Optional[float] = None
    alternatives: int = 1
    partial_match: bool = False
    place_id: Optional[str] = None
    place_type: Optional[str] = None


@dataclass
class RawDistance:
    """Distance as returned by a provider"""
    distance_km: float
    duration_seconds: Optional[int] = None


class ProviderAdapter(ABC):
    """Uniform geocode/distance contract implemented once per data source

    Adapters perform exactly one outbound call per invocation and never retry;
    failures are mapped onto the ``geo_resolver.errors`` provider taxonomy.
    """

    source: ProviderSource
    name: str = "provider"
    # Unmetered providers never consult the quota tracker
    metered: bool = True

    @property
    def is_configured(self) -> bool:
        """Whether the adapter has everything it needs to make a call"""
        return True

    @abstractmethod
    async def geocode(self, query: GeocodeQuery) -> List[RawCandidate]:
        """Resolve a free-text address into candidates"""

    @abstractmethod
    async def distance(self, origin: Coordinates, destination: Coordinates) -> RawDistance:
        """Travel distance between two points"""

    @abstractmethod
    async def reverse(self, point: Coordinates) -> List[RawCandidate]:
        """Resolve a point into the address(es) found there"""
