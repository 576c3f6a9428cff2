from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol

STATUS_OK = "OK"
LOCALITY_TYPE = "locality"
SUBLOCALITY_TYPE = "sublocality"
DEFAULT_NEARBY_RADIUS_M = 100


@dataclass(frozen=True)
class AddressComponent:
    long_name: str
    types: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GeocodeResult:
    formatted_address: str
    address_components: List[AddressComponent] = field(default_factory=list)


@dataclass(frozen=True)
class ReverseGeocodeResponse:
    status: str
    results: List[GeocodeResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


@dataclass(frozen=True)
class NearbyPlace:
    name: str
    types: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NearbySearchResponse:
    status: str
    results: List[NearbyPlace] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


class GeocodingProvider(Protocol):
    """Contract for reverse-geocoding providers.

    A non-OK ``status`` is a normal reply. Transport failures must raise
    :class:`pingmap.domain.errors.ResolutionError`.
    """

    def reverse_geocode(
        self,
        lat: float,
        lon: float,
        *,
        result_type: str = SUBLOCALITY_TYPE,
    ) -> ReverseGeocodeResponse:
        raise NotImplementedError


class PlacesProvider(Protocol):
    """Contract for nearby-places providers, same status semantics."""

    def nearby_search(
        self,
        lat: float,
        lon: float,
        *,
        radius_m: int = DEFAULT_NEARBY_RADIUS_M,
    ) -> NearbySearchResponse:
        raise NotImplementedError
