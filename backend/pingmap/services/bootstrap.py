from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine

from pingmap.config import Settings
from pingmap.domain.errors import ConfigurationError
from pingmap.infra.db.pings_repository import PingsRepository
from pingmap.infra.db.tables import metadata
from pingmap.infra.google.maps_client import GoogleMapsClient
from pingmap.infra.points.memory_store import InMemoryPointStore
from pingmap.providers.geocoding.google import GoogleGeocodingProvider, GooglePlacesProvider
from pingmap.providers.points.base import GeoPointStore

from .heatmap_pipeline import HeatmapPipeline
from .locality_resolver import LocalityResolver

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> GeoPointStore:
    if settings.database_url:
        engine = create_engine(settings.database_url, future=True)
        metadata.create_all(engine)
        return PingsRepository(engine)
    if settings.pings_file:
        return InMemoryPointStore.from_json_file(settings.pings_file)
    logger.warning("neither DATABASE_URL nor PINGS_FILE is set; serving an empty ping store")
    return InMemoryPointStore()


def build_resolver(settings: Settings) -> LocalityResolver:
    if not settings.google_api_key:
        raise ConfigurationError("GOOGLE_MAPS_API_KEY is required to resolve localities")
    client = GoogleMapsClient(
        settings.google_api_key,
        timeout=settings.http_timeout,
        max_retries=settings.http_retries,
    )
    return LocalityResolver(
        GoogleGeocodingProvider(client),
        GooglePlacesProvider(client),
        nearby_radius_m=settings.nearby_radius_m,
    )


def build_pipeline(
    settings: Settings,
    *,
    store: Optional[GeoPointStore] = None,
    resolver: Optional[LocalityResolver] = None,
) -> HeatmapPipeline:
    return HeatmapPipeline.from_settings(
        settings,
        store or build_store(settings),
        resolver or build_resolver(settings),
    )
