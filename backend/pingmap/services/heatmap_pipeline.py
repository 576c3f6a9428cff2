from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence

from pingmap.config import Settings
from pingmap.domain.aggregation import ClusterSummary, aggregate_cluster
from pingmap.domain.dbscan import DBSCAN, DEFAULT_EPS, DEFAULT_MIN_PTS
from pingmap.domain.errors import ConfigurationError
from pingmap.domain.models import GeoPoint, Geocode, Origin
from pingmap.domain.organize import ResultSet, organize, result_set_payload
from pingmap.domain.partition import DEFAULT_LAG, partition_points
from pingmap.providers.points.base import GeoPointStore

from .locality_resolver import LocalityResolver

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class HeatmapResult:
    current: ResultSet = field(default_factory=dict)
    predict: ResultSet = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Dict[str, List[dict]]]:
        return {
            "current": result_set_payload(self.current),
            "predict": result_set_payload(self.predict),
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HeatmapPipeline:
    """Partition, cluster, annotate and group pings for one request."""

    def __init__(
        self,
        store: GeoPointStore,
        resolver: LocalityResolver,
        *,
        eps: float = DEFAULT_EPS,
        min_pts: int = DEFAULT_MIN_PTS,
        lag: timedelta = DEFAULT_LAG,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if max_workers <= 0:
            raise ConfigurationError(f"max_workers must be a positive integer, got {max_workers!r}")
        self.store = store
        self.resolver = resolver
        self.clusterer = DBSCAN(eps=eps, min_pts=min_pts)
        self.lag = lag
        self.max_workers = max_workers
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: GeoPointStore,
        resolver: LocalityResolver,
    ) -> "HeatmapPipeline":
        return cls(
            store,
            resolver,
            eps=settings.eps,
            min_pts=settings.min_pts,
            lag=settings.lag,
            max_workers=settings.max_workers,
        )

    def run(self, origin: Optional[Origin] = None, now: Optional[datetime] = None) -> HeatmapResult:
        now = now or self.clock()
        points = self.store.fetch_all()
        partitions = partition_points(points, now, self.lag)
        logger.debug(
            "partitioned %d pings: current=%d predict=%d",
            len(points),
            len(partitions.current),
            len(partitions.predict),
        )

        with ThreadPoolExecutor(max_workers=2) as pool:
            current_future = pool.submit(self._summarize, partitions.current)
            predict_future = pool.submit(self._summarize, partitions.predict)
            current = current_future.result()
            predict = predict_future.result()

        geocodes = self._resolve_all(current + predict)
        current_geocodes = geocodes[: len(current)]
        predict_geocodes = geocodes[len(current) :]

        result = HeatmapResult(
            current=organize(s.to_entry(origin, g) for s, g in zip(current, current_geocodes)),
            predict=organize(s.to_entry(origin, g) for s, g in zip(predict, predict_geocodes)),
        )
        logger.info(
            "heatmap built: current_clusters=%d predict_clusters=%d unknown_localities=%d origin=%s",
            len(current),
            len(predict),
            sum(1 for geocode in geocodes if geocode.is_unknown),
            origin,
        )
        return result

    def _summarize(self, points: Sequence[GeoPoint]) -> List[ClusterSummary]:
        fitted = self.clusterer.fit(points)
        return [aggregate_cluster(cluster, points) for cluster in fitted.clusters]

    def _resolve_all(self, summaries: Sequence[ClusterSummary]) -> List[Geocode]:
        if not summaries:
            return []
        workers = min(self.max_workers, len(summaries))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures: List[Future] = [
                pool.submit(self.resolver.resolve, summary.latitude, summary.longitude) for summary in summaries
            ]
            try:
                # Collected in submission order, not completion order.
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                logger.error("locality resolution failed; aborting heatmap request")
                raise
