"""OpenStreetMap adapter tests (Nominatim and OSRM) against a mocked transport"""

import httpx
import pytest

from geo_resolver.errors import NotFoundError, QuotaExceededError, TransientProviderError
from geo_resolver.providers import Coordinates, GeocodeQuery, OpenStreetMapAdapter


SEARCH_OK = [
    {
        "place_id": 123456,
        "lat": "14.0650",
        "lon": "100.6100",
        "display_name": "Khlong Luang, Pathum Thani, 12120, Thailand",
        "importance": 0.65,
        "type": "administrative",
        "address": {
            "county": "Khlong Luang",
            "state": "Pathum Thani",
            "postcode": "12120",
            "country": "Thailand",
        },
    },
    {
        "place_id": 654321,
        "lat": "14.0208",
        "lon": "100.5250",
        "display_name": "Pathum Thani, Thailand",
        "importance": 0.55,
        "type": "administrative",
        "address": {"province": "Pathum Thani", "country": "Thailand"},
    },
]

REVERSE_OK = {
    "place_id": 42,
    "lat": "13.7563",
    "lon": "100.5018",
    "display_name": "Rama I Road, Pathum Wan, Bangkok, 10330, Thailand",
    "type": "primary",
    "address": {
        "road": "Rama I Road",
        "suburb": "Pathum Wan",
        "town": "Bangkok",
        "state": "Bangkok",
        "postcode": "10330",
        "country": "Thailand",
    },
}

QUERY = GeocodeQuery(address="Khlong Luang, Pathum Thani")
ORIGIN = Coordinates(13.7563, 100.5018)
DESTINATION = Coordinates(14.0208, 100.5250)


def adapter_for(handler, **kwargs) -> OpenStreetMapAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenStreetMapAdapter(client, user_agent="Logistics-Test/1.0", **kwargs)


def json_handler(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)
    return handler


class TestSearch:

    @pytest.mark.asyncio
    async def test_parses_places(self):
        seen = []
        adapter = adapter_for(json_handler(SEARCH_OK, seen=seen), email="ops@example.com")

        candidates = await adapter.geocode(QUERY)

        assert len(candidates) == 2
        first, second = candidates
        assert first.lat == pytest.approx(14.065)
        assert first.lng == pytest.approx(100.61)
        assert first.signal == 0.65
        assert first.alternatives == 2
        assert first.place_id == "123456"
        assert first.components.district == "Khlong Luang"
        assert first.components.state == "Pathum Thani"
        assert second.components.state == "Pathum Thani"

        request = seen[0]
        assert request.url.path == "/search"
        assert request.headers["User-Agent"] == "Logistics-Test/1.0"
        assert request.url.params["countrycodes"] == "th"
        assert request.url.params["email"] == "ops@example.com"
        assert request.url.params["q"] == "Khlong Luang, Pathum Thani, Thailand"

    @pytest.mark.asyncio
    async def test_company_name_leads_search_text(self):
        seen = []
        adapter = adapter_for(json_handler(SEARCH_OK, seen=seen))

        await adapter.geocode(GeocodeQuery(address="Bang Sue, Bangkok", company_name="บริษัท เอสซีจี โลจิสติกส์ จำกัด"))

        assert seen[0].url.params["q"] == "เอสซีจี โลจิสติกส์, Bang Sue, Bangkok, Thailand"

    @pytest.mark.asyncio
    async def test_empty_result_is_not_found(self):
        adapter = adapter_for(json_handler([]))

        with pytest.raises(NotFoundError):
            await adapter.geocode(QUERY)

    @pytest.mark.asyncio
    async def test_unexpected_body_is_transient(self):
        adapter = adapter_for(json_handler({"error": "oops"}))

        with pytest.raises(TransientProviderError):
            await adapter.geocode(QUERY)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code,error", [
        (429, QuotaExceededError),
        (502, TransientProviderError),
        (403, TransientProviderError),
    ])
    async def test_http_errors(self, status_code, error):
        adapter = adapter_for(json_handler([], status_code=status_code))

        with pytest.raises(error):
            await adapter.geocode(QUERY)

    @pytest.mark.asyncio
    async def test_network_failure_is_transient(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        adapter = adapter_for(handler)

        with pytest.raises(TransientProviderError):
            await adapter.geocode(QUERY)


class TestReverse:

    @pytest.mark.asyncio
    async def test_parses_address(self):
        seen = []
        adapter = adapter_for(json_handler(REVERSE_OK, seen=seen))

        candidates = await adapter.reverse(ORIGIN)

        assert seen[0].url.path == "/reverse"
        assert seen[0].url.params["lat"] == "13.7563"
        assert len(candidates) == 1
        components = candidates[0].components
        assert components.road == "Rama I Road"
        assert components.subdistrict == "Pathum Wan"
        assert components.city == "Bangkok"

    @pytest.mark.asyncio
    async def test_error_payload_is_not_found(self):
        adapter = adapter_for(json_handler({"error": "Unable to geocode"}))

        with pytest.raises(NotFoundError):
            await adapter.reverse(ORIGIN)


class TestRoute:

    @pytest.mark.asyncio
    async def test_parses_route(self):
        seen = []
        payload = {"code": "Ok", "routes": [{"distance": 30123.4, "duration": 2400.6}]}
        adapter = adapter_for(json_handler(payload, seen=seen))

        result = await adapter.distance(ORIGIN, DESTINATION)

        assert result.distance_km == pytest.approx(30.1234)
        assert result.duration_seconds == 2401
        request = seen[0]
        assert request.url.path == "/route/v1/driving/100.5018,13.7563;100.525,14.0208"
        assert request.url.params["overview"] == "false"

    @pytest.mark.asyncio
    async def test_no_route_is_not_found(self):
        adapter = adapter_for(json_handler({"code": "NoRoute", "message": "Impossible route"}, status_code=400))

        with pytest.raises(NotFoundError):
            await adapter.distance(ORIGIN, DESTINATION)

    @pytest.mark.asyncio
    async def test_ok_without_routes_is_not_found(self):
        adapter = adapter_for(json_handler({"code": "Ok", "routes": []}))

        with pytest.raises(NotFoundError):
            await adapter.distance(ORIGIN, DESTINATION)

    @pytest.mark.asyncio
    async def test_other_codes_are_transient(self):
        adapter = adapter_for(json_handler({"code": "InvalidQuery", "message": "bad"}, status_code=400))

        with pytest.raises(TransientProviderError):
            await adapter.distance(ORIGIN, DESTINATION)

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self):
        adapter = adapter_for(json_handler({"code": "Error"}, status_code=500))

        with pytest.raises(TransientProviderError):
            await adapter.distance(ORIGIN, DESTINATION)
