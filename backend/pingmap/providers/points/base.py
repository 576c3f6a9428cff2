from __future__ import annotations

from typing import List, Protocol

from pingmap.domain.models import GeoPoint


class GeoPointStore(Protocol):
    """Contract for ping sources. Returns the full, materialized set."""

    def fetch_all(self) -> List[GeoPoint]:
        raise NotImplementedError
