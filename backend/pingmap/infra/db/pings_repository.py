from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import func, insert, select
from sqlalchemy.engine import Engine

from pingmap.domain.models import GeoPoint
from pingmap.providers.points.base import GeoPointStore

from .tables import pings_table


class PingsRepository(GeoPointStore):
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def fetch_all(self) -> List[GeoPoint]:
        with self.engine.begin() as conn:
            rows = conn.execute(
                select(pings_table.c.lat, pings_table.c.lon, pings_table.c.observed_ts).order_by(pings_table.c.id)
            ).all()
        return [GeoPoint(latitude=row.lat, longitude=row.lon, timestamp=int(row.observed_ts)) for row in rows]

    def insert_many(self, points: Iterable[GeoPoint]) -> int:
        payload = [
            {"lat": point.latitude, "lon": point.longitude, "observed_ts": point.timestamp}
            for point in points
        ]
        if not payload:
            return 0
        with self.engine.begin() as conn:
            conn.execute(insert(pings_table), payload)
        return len(payload)

    def count(self) -> int:
        with self.engine.begin() as conn:
            return conn.execute(select(func.count()).select_from(pings_table)).scalar_one()
