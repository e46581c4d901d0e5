"""FastAPI dependencies"""

from fastapi import Request

from geo_resolver.services.location import LocationService


def get_location_service(request: Request) -> LocationService:
    """The process-wide service built during application startup"""
    return request.app.state.location_service
