from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from pingmap.domain.errors import ResolutionError

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
    NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        *,
        max_retries: int = 0,
        retry_backoff_s: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required for GoogleMapsClient")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_s = retry_backoff_s
        self._transport = transport

    def reverse_geocode(self, lat: float, lon: float, result_type: str) -> dict:
        params = {
            "latlng": f"{lat},{lon}",
            "result_type": result_type,
            "key": self.api_key,
        }
        return self._get_json(self.GEOCODE_URL, params, provider="google_geocode")

    def nearby_search(self, lat: float, lon: float, radius_m: int) -> dict:
        params = {
            "location": f"{lat},{lon}",
            "radius": radius_m,
            "key": self.api_key,
        }
        return self._get_json(self.NEARBY_SEARCH_URL, params, provider="google_places")

    def _get_json(self, url: str, params: dict, *, provider: str) -> dict:
        attempt = 0
        while True:
            try:
                return self._request(url, params)
            except (httpx.HTTPError, ValueError) as exc:
                if attempt >= self.max_retries:
                    logger.error("%s request failed after %d attempt(s): %s", provider, attempt + 1, exc)
                    raise ResolutionError(f"{provider} request failed: {exc}", provider=provider) from exc
                delay = self.retry_backoff_s * (2**attempt)
                logger.warning(
                    "%s request failed (attempt %d/%d): %s; retrying in %.2fs",
                    provider,
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                    delay,
                )
                time.sleep(delay)
                attempt += 1

    def _request(self, url: str, params: dict) -> dict:
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.get(url, params=params)
            resp.raise_for_status()
            data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"unexpected payload type {type(data).__name__}")
        return data
