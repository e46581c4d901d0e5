"""
Test configuration and fixtures for the location resolution test suite.

API tests run the real orchestrator, scoring and assembler against fake
network providers; the offline mathematical provider is always real.
"""

import os

# Must be set before the app (and its rate limiter) is imported
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "100000")

from datetime import timedelta
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from geo_resolver.config import settings
from geo_resolver.dependencies import get_location_service
from geo_resolver.main import app
from geo_resolver.providers import MathematicalAdapter, ProviderSource
from geo_resolver.services import (
    FallbackOrchestrator, LocationService, ProviderSlot, QuotaTracker, ResponseAssembler, ScoringEngine
)
from tests.fakes import FakeAdapter, FakeClock


@pytest.fixture(scope="function")
def api_key() -> str:
    """Provide a valid API key for authenticated requests"""
    keys = settings.get_api_keys()
    if not keys:
        raise RuntimeError("No API keys configured for tests")
    return keys[0]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def quota(clock: FakeClock) -> QuotaTracker:
    """Tracker with a small primary budget and an unlimited secondary"""
    tracker = QuotaTracker(clock=clock)
    tracker.register(
        ProviderSource.PRIMARY.value, calls_limit=10, window_duration=timedelta(days=30), warning_threshold=8
    )
    tracker.register(ProviderSource.SECONDARY.value, calls_limit=None, window_duration=timedelta(days=30))
    return tracker


@pytest.fixture
def primary() -> FakeAdapter:
    return FakeAdapter(ProviderSource.PRIMARY)


@pytest.fixture
def secondary() -> FakeAdapter:
    return FakeAdapter(ProviderSource.SECONDARY)


@pytest.fixture
def location_service(primary: FakeAdapter, secondary: FakeAdapter, quota: QuotaTracker) -> LocationService:
    chain = [
        ProviderSlot(primary, timeout=0.5),
        ProviderSlot(secondary, timeout=0.5),
        ProviderSlot(MathematicalAdapter()),
    ]
    return LocationService(
        orchestrator=FallbackOrchestrator(chain, quota),
        scoring=ScoringEngine(),
        assembler=ResponseAssembler(quota),
    )


@pytest.fixture(scope="function")
def client(api_key: str, location_service: LocationService) -> TestClient:
    """FastAPI TestClient with default auth headers"""
    app.dependency_overrides[get_location_service] = lambda: location_service

    with TestClient(app) as test_client:
        default_headers: Dict[str, str] = {
            "X-API-Key": api_key,
        }

        # Merge default headers into each request by wrapping the original call
        original_request = test_client.request

        def request_with_auth(method, url, **kwargs):  # type: ignore[override]
            headers = kwargs.pop("headers", None) or {}
            merged_headers = {**default_headers, **headers}
            return original_request(method, url, headers=merged_headers, **kwargs)

        test_client.request = request_with_auth  # type: ignore[assignment]
        yield test_client

    app.dependency_overrides.pop(get_location_service, None)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
