"""Density-based clustering of pings on raw latitude/longitude.

Thin wrapper over :class:`sklearn.cluster.DBSCAN`. Neighbourhoods use planar
Euclidean distance on the ``(latitude, longitude)`` pair, without geodesic
correction. Every point carries one label: ``NOISE`` or the id of the cluster
that first reached it, with ids assigned in discovery order.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np
from sklearn.cluster import DBSCAN as SKDBSCAN

from .errors import ConfigurationError
from .models import Cluster, GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_EPS = 1.5
DEFAULT_MIN_PTS = 10

NOISE = -1


@dataclass(frozen=True)
class DBSCANResult:
    labels: Tuple[int, ...]
    clusters: Tuple[Cluster, ...]

    @property
    def noise(self) -> Tuple[int, ...]:
        return tuple(idx for idx, label in enumerate(self.labels) if label == NOISE)


class DBSCAN:
    def __init__(self, eps: float = DEFAULT_EPS, min_pts: int = DEFAULT_MIN_PTS):
        if not isinstance(eps, (int, float)) or not math.isfinite(eps) or eps <= 0:
            raise ConfigurationError(f"eps must be a positive finite number, got {eps!r}")
        if isinstance(min_pts, bool) or not isinstance(min_pts, int) or min_pts <= 0:
            raise ConfigurationError(f"min_pts must be a positive integer, got {min_pts!r}")
        self.eps = float(eps)
        self.min_pts = min_pts

    def fit(self, points: Sequence[GeoPoint]) -> DBSCANResult:
        if not points:
            return DBSCANResult(labels=(), clusters=())

        coords = [(p.latitude, p.longitude) for p in points]
        model = SKDBSCAN(eps=self.eps, min_samples=self.min_pts).fit(np.asarray(coords, dtype=float))
        labels = tuple(int(label) for label in model.labels_)

        members: Dict[int, List[int]] = {}
        for idx, label in enumerate(labels):
            if label != NOISE:
                members.setdefault(label, []).append(idx)

        # core_sample_indices_ is ascending, so the first hit per label is the seed.
        seeds: Dict[int, int] = {}
        for idx in model.core_sample_indices_:
            seeds.setdefault(labels[idx], int(idx))

        clusters = tuple(
            Cluster(id=cluster_id, seed=seeds[cluster_id], members=tuple(members[cluster_id]))
            for cluster_id in sorted(members)
        )
        result = DBSCANResult(labels=labels, clusters=clusters)
        logger.debug(
            "dbscan eps=%s min_pts=%s points=%d clusters=%d noise=%d",
            self.eps,
            self.min_pts,
            len(coords),
            len(clusters),
            len(result.noise),
        )
        return result


def dbscan(points: Sequence[GeoPoint], eps: float = DEFAULT_EPS, min_pts: int = DEFAULT_MIN_PTS) -> DBSCANResult:
    return DBSCAN(eps=eps, min_pts=min_pts).fit(points)
