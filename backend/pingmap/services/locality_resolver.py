from __future__ import annotations

import logging

from pingmap.domain.models import UNKNOWN_GEOCODE, Geocode
from pingmap.providers.geocoding.base import (
    DEFAULT_NEARBY_RADIUS_M,
    LOCALITY_TYPE,
    SUBLOCALITY_TYPE,
    GeocodingProvider,
    NearbySearchResponse,
    PlacesProvider,
    ReverseGeocodeResponse,
)

logger = logging.getLogger(__name__)


class LocalityResolver:
    """Resolve a centroid into a place name and a locality label.

    Reverse geocoding restricted to sublocalities is tried first. A non-OK
    reply falls back to a nearby-places search; if that is non-OK too the
    empty :class:`Geocode` is returned. Transport failures raised by either
    provider (``ResolutionError``) propagate unchanged. Nothing is cached.
    """

    def __init__(
        self,
        geocoder: GeocodingProvider,
        places: PlacesProvider,
        *,
        nearby_radius_m: int = DEFAULT_NEARBY_RADIUS_M,
    ):
        self.geocoder = geocoder
        self.places = places
        self.nearby_radius_m = nearby_radius_m

    def resolve(self, lat: float, lon: float) -> Geocode:
        response = self.geocoder.reverse_geocode(lat, lon, result_type=SUBLOCALITY_TYPE)
        if response.ok and response.results:
            return self._from_geocode(response)
        logger.info(
            "reverse geocode status=%s results=%d at (%s, %s); falling back to nearby search",
            response.status,
            len(response.results),
            lat,
            lon,
        )
        return self._resolve_nearby(lat, lon)

    def _resolve_nearby(self, lat: float, lon: float) -> Geocode:
        response = self.places.nearby_search(lat, lon, radius_m=self.nearby_radius_m)
        if not response.ok:
            logger.debug("nearby search status=%s at (%s, %s); locality unknown", response.status, lat, lon)
            return UNKNOWN_GEOCODE
        return self._from_nearby(response)

    @staticmethod
    def _from_geocode(response: ReverseGeocodeResponse) -> Geocode:
        first = response.results[0]
        locality = next(
            (comp.long_name for comp in first.address_components if LOCALITY_TYPE in comp.types),
            "",
        )
        return Geocode(estimate_location=first.formatted_address, locality=locality)

    @staticmethod
    def _from_nearby(response: NearbySearchResponse) -> Geocode:
        locality = ""
        estimate = ""
        for place in response.results:
            if LOCALITY_TYPE in place.types:
                if not locality:
                    locality = place.name
            elif not estimate:
                estimate = place.name
            if locality and estimate:
                break
        return Geocode(estimate_location=estimate, locality=locality)
