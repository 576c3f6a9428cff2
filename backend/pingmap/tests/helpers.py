from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from pingmap.domain.models import GeoPoint
from pingmap.providers.geocoding.base import (
    AddressComponent,
    GeocodeResult,
    NearbySearchResponse,
    ReverseGeocodeResponse,
)

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
OLD_TS = int(NOW.timestamp()) - 3 * 3600
RECENT_TS = int(NOW.timestamp()) - 30 * 60


class StaticGeocoder:
    def __init__(self, respond: Callable[[float, float], ReverseGeocodeResponse]):
        self._respond = respond
        self.calls: List[Tuple[float, float, str]] = []

    def reverse_geocode(self, lat, lon, *, result_type="sublocality"):
        self.calls.append((lat, lon, result_type))
        return self._respond(lat, lon)


class StaticPlaces:
    def __init__(self, respond: Callable[[float, float], NearbySearchResponse]):
        self._respond = respond
        self.calls: List[Tuple[float, float, int]] = []

    def nearby_search(self, lat, lon, *, radius_m=100):
        self.calls.append((lat, lon, radius_m))
        return self._respond(lat, lon)


def geocode_ok(address: str, locality: Optional[str]) -> ReverseGeocodeResponse:
    components = [AddressComponent(long_name="Sub", types=["sublocality", "political"])]
    if locality is not None:
        components.append(AddressComponent(long_name=locality, types=["locality", "political"]))
    return ReverseGeocodeResponse(
        status="OK",
        results=[GeocodeResult(formatted_address=address, address_components=components)],
    )


def blob(lat: float, lon: float, count: int = 12, ts: int = OLD_TS) -> List[GeoPoint]:
    """``count`` pings within a few metres of ``(lat, lon)``."""
    return [GeoPoint(latitude=lat + i * 0.0001, longitude=lon - i * 0.0001, timestamp=ts) for i in range(count)]
