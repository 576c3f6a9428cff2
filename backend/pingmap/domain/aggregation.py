from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .models import Cluster, GeoPoint, Geocode, HeatmapEntry, Origin

EARTH_RADIUS_KM = 6371.0


def centroid(points: Sequence[GeoPoint]) -> Tuple[float, float]:
    if not points:
        raise AssertionError("centroid of an empty cluster")
    count = len(points)
    lat_sum = 0.0
    lon_sum = 0.0
    for point in points:
        lat_sum += point.latitude
        lon_sum += point.longitude
    return lat_sum / count, lon_sum / count


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))
    return EARTH_RADIUS_KM * c


def distance_from_origin(origin: Optional[Origin], latitude: float, longitude: float) -> float:
    if origin is None or origin.is_sentinel:
        return 0.0
    return haversine_km(origin.latitude, origin.longitude, latitude, longitude)


@dataclass(frozen=True)
class ClusterSummary:
    """Centroid and size of one cluster, before locality resolution."""

    cluster_id: int
    latitude: float
    longitude: float
    pax_count: int

    def to_entry(self, origin: Optional[Origin], geocode: Geocode) -> HeatmapEntry:
        return HeatmapEntry(
            distance=distance_from_origin(origin, self.latitude, self.longitude),
            latitude=self.latitude,
            longitude=self.longitude,
            estimate_location=geocode.estimate_location,
            locality=geocode.locality,
            pax_count=self.pax_count,
        )


def aggregate_cluster(cluster: Cluster, points: Sequence[GeoPoint]) -> ClusterSummary:
    members = [points[idx] for idx in cluster.members]
    lat, lon = centroid(members)
    return ClusterSummary(cluster_id=cluster.id, latitude=lat, longitude=lon, pax_count=len(members))
