from __future__ import annotations

import os
from typing import Optional

from pingmap.domain.errors import ResolutionError
from pingmap.infra.google.maps_client import GoogleMapsClient

from .base import (
    DEFAULT_NEARBY_RADIUS_M,
    SUBLOCALITY_TYPE,
    AddressComponent,
    GeocodeResult,
    GeocodingProvider,
    NearbyPlace,
    NearbySearchResponse,
    PlacesProvider,
    ReverseGeocodeResponse,
)


def _build_client(api_key: Optional[str], timeout: float) -> GoogleMapsClient:
    api_key = api_key or os.getenv("GOOGLE_MAPS_API_KEY")
    if not api_key:
        raise RuntimeError("GOOGLE_MAPS_API_KEY is required for the Google providers")
    return GoogleMapsClient(api_key, timeout=timeout)


class GoogleGeocodingProvider(GeocodingProvider):
    def __init__(
        self,
        client: Optional[GoogleMapsClient] = None,
        *,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.client = client or _build_client(api_key, timeout)

    def reverse_geocode(
        self,
        lat: float,
        lon: float,
        *,
        result_type: str = SUBLOCALITY_TYPE,
    ) -> ReverseGeocodeResponse:
        payload = self.client.reverse_geocode(lat, lon, result_type)
        try:
            return self._map_response(payload)
        except (AttributeError, TypeError) as exc:
            raise ResolutionError(f"malformed geocode payload: {exc}", provider="google_geocode") from exc

    @staticmethod
    def _map_response(payload: dict) -> ReverseGeocodeResponse:
        results = []
        for item in payload.get("results") or []:
            components = [
                AddressComponent(long_name=comp.get("long_name", ""), types=list(comp.get("types") or []))
                for comp in item.get("address_components") or []
            ]
            results.append(
                GeocodeResult(
                    formatted_address=item.get("formatted_address", ""),
                    address_components=components,
                )
            )
        return ReverseGeocodeResponse(status=payload.get("status", ""), results=results)


class GooglePlacesProvider(PlacesProvider):
    def __init__(
        self,
        client: Optional[GoogleMapsClient] = None,
        *,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.client = client or _build_client(api_key, timeout)

    def nearby_search(
        self,
        lat: float,
        lon: float,
        *,
        radius_m: int = DEFAULT_NEARBY_RADIUS_M,
    ) -> NearbySearchResponse:
        payload = self.client.nearby_search(lat, lon, radius_m)
        try:
            return self._map_response(payload)
        except (AttributeError, TypeError) as exc:
            raise ResolutionError(f"malformed nearby search payload: {exc}", provider="google_places") from exc

    @staticmethod
    def _map_response(payload: dict) -> NearbySearchResponse:
        results = [
            NearbyPlace(name=item.get("name", ""), types=list(item.get("types") or []))
            for item in payload.get("results") or []
        ]
        return NearbySearchResponse(status=payload.get("status", ""), results=results)
