from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pingmap.domain.models import GeoPoint
from pingmap.domain.partition import cutoff_seconds, partition_points

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
CUTOFF = int(NOW.timestamp()) - 2 * 3600


def _point(ts: int, lat: float = 1.0) -> GeoPoint:
    return GeoPoint(latitude=lat, longitude=1.0, timestamp=ts)


def test_cutoff_is_two_hours_before_now():
    assert cutoff_seconds(NOW) == CUTOFF


def test_boundary_goes_to_predict():
    before, at, after = _point(CUTOFF - 1), _point(CUTOFF), _point(CUTOFF + 1)
    parts = partition_points([before, at, after], NOW)
    assert parts.current == [before]
    assert parts.predict == [at, after]


def test_epoch_relative_and_extreme_timestamps():
    zero = _point(0)
    negative = _point(-86400)
    far_future = _point(2**62)
    parts = partition_points([zero, negative, far_future], NOW)
    assert parts.current == [zero, negative]
    assert parts.predict == [far_future]


def test_partitions_are_disjoint_and_cover_input_in_order():
    points = [_point(CUTOFF + offset, lat=float(idx)) for idx, offset in enumerate([-10, 5, -3, 0, 7200, -7200])]
    parts = partition_points(points, NOW)
    assert len(parts.current) + len(parts.predict) == len(points)
    assert not {id(p) for p in parts.current} & {id(p) for p in parts.predict}
    assert [p.latitude for p in parts.current] == [0.0, 2.0, 5.0]
    assert [p.latitude for p in parts.predict] == [1.0, 3.0, 4.0]


def test_naive_now_is_treated_as_utc():
    naive = NOW.replace(tzinfo=None)
    assert cutoff_seconds(naive) == CUTOFF


def test_custom_lag():
    point = _point(int(NOW.timestamp()) - 45 * 60)
    assert partition_points([point], NOW, lag=timedelta(minutes=30)).current == [point]
    assert partition_points([point], NOW).predict == [point]


def test_empty_input():
    parts = partition_points([], NOW)
    assert parts.current == []
    assert parts.predict == []


def test_fractional_now_rounds_cutoff_up():
    now = datetime(2026, 3, 1, 12, 0, 0, 500000, tzinfo=timezone.utc)
    # now - 2h falls half a second after CUTOFF.
    assert cutoff_seconds(now) == CUTOFF + 1

    on_floor, on_ceiling = _point(CUTOFF), _point(CUTOFF + 1)
    parts = partition_points([on_floor, on_ceiling], now)
    assert parts.current == [on_floor]
    assert parts.predict == [on_ceiling]


def test_single_microsecond_past_whole_second():
    now = NOW + timedelta(microseconds=1)
    assert partition_points([_point(CUTOFF)], now).current == [_point(CUTOFF)]
    assert partition_points([_point(CUTOFF + 1)], now).predict == [_point(CUTOFF + 1)]
