from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, TypeVar

from pingmap.domain.dbscan import DEFAULT_EPS, DEFAULT_MIN_PTS
from pingmap.domain.errors import ConfigurationError
from pingmap.providers.geocoding.base import DEFAULT_NEARBY_RADIUS_M

T = TypeVar("T")


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name}={raw!r} is not a valid {cast.__name__}") from exc


@dataclass(frozen=True)
class Settings:
    eps: float = DEFAULT_EPS
    min_pts: int = DEFAULT_MIN_PTS
    lag_minutes: int = 120
    nearby_radius_m: int = DEFAULT_NEARBY_RADIUS_M
    max_workers: int = 8
    http_timeout: float = 10.0
    http_retries: int = 0
    google_api_key: Optional[str] = None
    database_url: Optional[str] = None
    pings_file: Optional[str] = None
    frontend_origin: str = "*"

    def __post_init__(self):
        if self.lag_minutes < 0:
            raise ConfigurationError("PINGMAP_LAG_MINUTES must be >= 0")
        if self.nearby_radius_m <= 0:
            raise ConfigurationError("PINGMAP_NEARBY_RADIUS_M must be > 0")
        if self.max_workers <= 0:
            raise ConfigurationError("PINGMAP_MAX_WORKERS must be > 0")
        if self.http_timeout <= 0:
            raise ConfigurationError("PINGMAP_HTTP_TIMEOUT must be > 0")
        if self.http_retries < 0:
            raise ConfigurationError("PINGMAP_HTTP_RETRIES must be >= 0")

    @property
    def lag(self) -> timedelta:
        return timedelta(minutes=self.lag_minutes)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            eps=_env("PINGMAP_EPS", DEFAULT_EPS, float),
            min_pts=_env("PINGMAP_MIN_PTS", DEFAULT_MIN_PTS, int),
            lag_minutes=_env("PINGMAP_LAG_MINUTES", 120, int),
            nearby_radius_m=_env("PINGMAP_NEARBY_RADIUS_M", DEFAULT_NEARBY_RADIUS_M, int),
            max_workers=_env("PINGMAP_MAX_WORKERS", 8, int),
            http_timeout=_env("PINGMAP_HTTP_TIMEOUT", 10.0, float),
            http_retries=_env("PINGMAP_HTTP_RETRIES", 0, int),
            google_api_key=os.getenv("GOOGLE_MAPS_API_KEY") or None,
            database_url=os.getenv("DATABASE_URL") or None,
            pings_file=os.getenv("PINGS_FILE") or None,
            frontend_origin=os.getenv("FRONTEND_ORIGIN", "*"),
        )
