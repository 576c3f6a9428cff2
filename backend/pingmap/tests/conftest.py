from __future__ import annotations

from typing import Dict, Optional

import pytest

from pingmap.domain.errors import ResolutionError
from pingmap.providers.geocoding.base import NearbySearchResponse, ReverseGeocodeResponse
from pingmap.services.locality_resolver import LocalityResolver
from pingmap.tests.helpers import StaticGeocoder, StaticPlaces, geocode_ok


@pytest.fixture()
def make_resolver():
    def _build(
        *,
        localities: Optional[Dict[int, str]] = None,
        failing_at: Optional[int] = None,
    ) -> LocalityResolver:
        """Reverse geocoding keyed by ``round(lat)``; unknown keys end in the empty Geocode."""
        localities = localities or {}

        def respond(lat, lon):
            key = round(lat)
            if failing_at is not None and key == failing_at:
                raise ResolutionError("geocoder unreachable", provider="stub")
            if key in localities:
                return geocode_ok(f"Street {key}", localities[key])
            return ReverseGeocodeResponse(status="ZERO_RESULTS")

        return LocalityResolver(
            StaticGeocoder(respond),
            StaticPlaces(lambda lat, lon: NearbySearchResponse(status="ZERO_RESULTS")),
        )

    return _build
