"""Configuration management for the location resolution service"""

from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PROVIDER_SOURCES = ("primary", "secondary", "mathematical")


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in environment
    )

    # Primary provider (Google Maps)
    google_maps_api_key: Optional[str] = Field(default=None)
    google_geocoding_url: str = Field(default="https://maps.googleapis.com/maps/api/geocode/json")
    google_distance_matrix_url: str = Field(default="https://maps.googleapis.com/maps/api/distancematrix/json")
    google_travel_mode: str = Field(default="driving")

    # Secondary provider (OpenStreetMap)
    nominatim_url: str = Field(default="https://nominatim.openstreetmap.org")
    nominatim_user_agent: str = Field(default="Logistics-System/1.0")
    nominatim_email: Optional[str] = Field(default=None)
    nominatim_result_limit: int = Field(default=10, ge=1, le=50)
    osrm_url: str = Field(default="https://router.project-osrm.org")
    osrm_profile: str = Field(default="driving")

    # Regional defaults
    region_code: str = Field(default="th")
    country_name: str = Field(default="Thailand")
    language: str = Field(default="th")

    # Provider chain and time budgets (seconds)
    provider_order: str = Field(default="primary,secondary,mathematical")
    primary_timeout_seconds: float = Field(default=12.0, gt=0)
    secondary_timeout_seconds: float = Field(default=15.0, gt=0)
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # Quota configuration
    google_quota_limit: int = Field(default=9500, ge=0)
    google_quota_warning: int = Field(default=9000, ge=0)
    secondary_quota_limit: Optional[int] = Field(default=None, ge=0)
    quota_window_days: int = Field(default=30, ge=1)

    # Scoring weights
    score_confidence_weight: float = Field(default=0.4, ge=0)
    score_match_weight: float = Field(default=0.6, ge=0)
    score_completeness_bonus: float = Field(default=0.05, ge=0)
    score_ambiguity_penalty: float = Field(default=0.1, ge=0)
    trust_primary: float = Field(default=1.0, ge=0)
    trust_secondary: float = Field(default=0.6, ge=0)
    trust_mathematical: float = Field(default=0.1, ge=0)

    # Result shaping
    max_candidates: int = Field(default=8, ge=1)
    distance_suspicious_km: float = Field(default=500.0, gt=0)
    distance_negligible_km: float = Field(default=0.1, ge=0)

    # API configuration
    api_keys_str: str = Field(default="dev-key-123,admin-key-456", validation_alias="API_KEYS")
    rate_limit_per_minute: int = Field(default=120)

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # Application configuration
    app_name: str = "Location Resolution API"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False)

    def get_api_keys(self) -> List[str]:
        """Parse comma-separated API keys"""
        return [key.strip() for key in self.api_keys_str.split(",") if key.strip()]

    def get_provider_order(self) -> List[str]:
        """Parse the provider chain; the mathematical fallback is always last"""
        order: List[str] = []
        for name in self.provider_order.split(","):
            name = name.strip().lower()
            if not name:
                continue
            if name not in PROVIDER_SOURCES:
                raise ValueError(f"Unknown provider in PROVIDER_ORDER: {name}")
            if name not in order and name != "mathematical":
                order.append(name)
        order.append("mathematical")
        return order

    def get_trust_weights(self) -> Dict[str, float]:
        """Trust weight per provider source"""
        return {
            "primary": self.trust_primary,
            "secondary": self.trust_secondary,
            "mathematical": self.trust_mathematical,
        }


# Global settings instance
settings = Settings()
