from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from .models import GeoPoint

DEFAULT_LAG = timedelta(hours=2)
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SECOND = timedelta(seconds=1)


@dataclass(frozen=True)
class Partitions:
    current: List[GeoPoint] = field(default_factory=list)
    predict: List[GeoPoint] = field(default_factory=list)


def cutoff_seconds(now: datetime, lag: timedelta = DEFAULT_LAG) -> int:
    """Smallest whole unix second not earlier than ``now - lag``.

    For an integer timestamp ``ts``, ``ts < now - lag`` holds exactly when
    ``ts < cutoff_seconds(now, lag)``, fractional seconds included.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    # ceil((now - lag) - EPOCH) in seconds, exact to the microsecond.
    return -((EPOCH - (now - lag)) // _SECOND)


def partition_points(
    points: Iterable[GeoPoint],
    now: datetime,
    lag: timedelta = DEFAULT_LAG,
) -> Partitions:
    # Compared as integers so out-of-range timestamps never hit datetime.
    cutoff = cutoff_seconds(now, lag)
    current: List[GeoPoint] = []
    predict: List[GeoPoint] = []
    for point in points:
        if point.timestamp < cutoff:
            current.append(point)
        else:
            predict.append(point)
    return Partitions(current=current, predict=predict)
