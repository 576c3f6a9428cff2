from __future__ import annotations

import httpx
import pytest

from pingmap.domain.errors import ResolutionError
from pingmap.infra.google.maps_client import GoogleMapsClient
from pingmap.providers.geocoding.google import GoogleGeocodingProvider, GooglePlacesProvider

GEOCODE_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "Sol, Madrid, Spain",
            "address_components": [
                {"long_name": "Sol", "short_name": "Sol", "types": ["sublocality", "political"]},
                {"long_name": "Madrid", "short_name": "Madrid", "types": ["locality", "political"]},
            ],
            "place_id": "abc",
            "types": ["sublocality"],
        }
    ],
}

NEARBY_PAYLOAD = {
    "html_attributions": [],
    "status": "OK",
    "results": [
        {"name": "Madrid", "types": ["locality", "political"]},
        {"name": "Plaza Mayor", "types": ["tourist_attraction", "point_of_interest"]},
    ],
}


def _client(handler, **kwargs) -> GoogleMapsClient:
    return GoogleMapsClient("test-key", transport=httpx.MockTransport(handler), **kwargs)


def test_reverse_geocode_request_and_mapping():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=GEOCODE_PAYLOAD)

    provider = GoogleGeocodingProvider(_client(handler))
    response = provider.reverse_geocode(40.4168, -3.7038)

    params = seen[0].url.params
    assert seen[0].url.path == "/maps/api/geocode/json"
    assert params["latlng"] == "40.4168,-3.7038"
    assert params["result_type"] == "sublocality"
    assert params["key"] == "test-key"
    assert response.ok
    assert response.results[0].formatted_address == "Sol, Madrid, Spain"
    assert [c.long_name for c in response.results[0].address_components] == ["Sol", "Madrid"]
    assert response.results[0].address_components[1].types == ["locality", "political"]


def test_nearby_search_request_and_mapping():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=NEARBY_PAYLOAD)

    provider = GooglePlacesProvider(_client(handler))
    response = provider.nearby_search(40.4168, -3.7038)

    params = seen[0].url.params
    assert seen[0].url.path == "/maps/api/place/nearbysearch/json"
    assert params["location"] == "40.4168,-3.7038"
    assert params["radius"] == "100"
    assert response.ok
    assert [p.name for p in response.results] == ["Madrid", "Plaza Mayor"]


def test_non_ok_status_is_a_normal_reply():
    provider = GoogleGeocodingProvider(_client(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})))
    response = provider.reverse_geocode(0.5, 0.5)
    assert response.status == "ZERO_RESULTS"
    assert not response.ok
    assert response.results == []


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(500, json={"error": "boom"}),
        lambda request: httpx.Response(200, content=b"<html>not json</html>"),
        lambda request: httpx.Response(200, json=["not", "an", "object"]),
    ],
)
def test_transport_failures_raise_resolution_error(handler):
    provider = GoogleGeocodingProvider(_client(handler))
    with pytest.raises(ResolutionError) as excinfo:
        provider.reverse_geocode(1.0, 1.0)
    assert excinfo.value.provider == "google_geocode"


def test_connection_error_raises_resolution_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = GooglePlacesProvider(_client(handler))
    with pytest.raises(ResolutionError) as excinfo:
        provider.nearby_search(1.0, 1.0)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_timeout_raises_resolution_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    provider = GoogleGeocodingProvider(_client(handler))
    with pytest.raises(ResolutionError):
        provider.reverse_geocode(1.0, 1.0)


def test_malformed_results_raise_resolution_error():
    provider = GooglePlacesProvider(_client(lambda request: httpx.Response(200, json={"status": "OK", "results": ["x"]})))
    with pytest.raises(ResolutionError):
        provider.nearby_search(1.0, 1.0)


def test_retries_then_succeeds():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        if calls["count"] == 1:
            raise httpx.ConnectError("flaky", request=request)
        return httpx.Response(200, json=GEOCODE_PAYLOAD)

    provider = GoogleGeocodingProvider(_client(handler, max_retries=2, retry_backoff_s=0))
    assert provider.reverse_geocode(1.0, 1.0).ok
    assert calls["count"] == 2


def test_retries_exhausted_raise_resolution_error():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        return httpx.Response(503)

    provider = GoogleGeocodingProvider(_client(handler, max_retries=2, retry_backoff_s=0))
    with pytest.raises(ResolutionError):
        provider.reverse_geocode(1.0, 1.0)
    assert calls["count"] == 3


def test_client_requires_api_key():
    with pytest.raises(ValueError):
        GoogleMapsClient("")


def test_provider_without_key_raises(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        GoogleGeocodingProvider()
