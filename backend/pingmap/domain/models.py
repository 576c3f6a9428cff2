from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence, Tuple

from .errors import ValidationError


def _to_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be numeric, got {value!r}") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    timestamp: int

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "GeoPoint":
        """Build a point from a raw ``(lat, lon, unix_seconds)`` triple.

        Float timestamps are rounded to the nearest second, half to even.
        """
        if len(row) != 3:
            raise ValidationError(f"expected (lat, lon, ts), got {len(row)} values")
        lat = _to_float(row[0], "latitude")
        lon = _to_float(row[1], "longitude")
        ts = row[2]
        if isinstance(ts, int) and not isinstance(ts, bool):
            timestamp = ts
        else:
            timestamp = int(round(_to_float(ts, "timestamp")))
        return cls(latitude=lat, longitude=lon, timestamp=timestamp)


@dataclass(frozen=True)
class Origin:
    latitude: float
    longitude: float

    @property
    def is_sentinel(self) -> bool:
        return self.latitude == 0 and self.longitude == 0

    @classmethod
    def parse(cls, lat: Optional[str], lon: Optional[str]) -> Optional["Origin"]:
        """Parse the optional ``lat``/``long`` query pair.

        Returns ``None`` when neither is given or when both are zero, which
        clients have historically sent to mean "no origin".
        """
        lat = (lat or "").strip()
        lon = (lon or "").strip()
        if not lat and not lon:
            return None
        if not lat or not lon:
            raise ValidationError("lat and long must be provided together")
        latitude = _to_float(lat, "lat")
        longitude = _to_float(lon, "long")
        if not -90.0 <= latitude <= 90.0:
            raise ValidationError(f"lat out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise ValidationError(f"long out of range: {longitude}")
        origin = cls(latitude=latitude, longitude=longitude)
        if origin.is_sentinel:
            return None
        return origin


@dataclass(frozen=True)
class Cluster:
    id: int
    seed: int
    members: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class Geocode:
    estimate_location: str = ""
    locality: str = ""

    @property
    def is_unknown(self) -> bool:
        return not self.estimate_location and not self.locality


UNKNOWN_GEOCODE = Geocode()


@dataclass(frozen=True)
class HeatmapEntry:
    distance: float
    latitude: float
    longitude: float
    estimate_location: str
    locality: str
    pax_count: int

    def to_dict(self) -> dict:
        return asdict(self)
