from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Sequence

from pingmap.domain.errors import ValidationError
from pingmap.domain.models import GeoPoint
from pingmap.providers.points.base import GeoPointStore


class InMemoryPointStore(GeoPointStore):
    def __init__(self, points: Iterable[GeoPoint] = ()):
        self._points: List[GeoPoint] = list(points)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Any]]) -> "InMemoryPointStore":
        return cls(GeoPoint.from_row(row) for row in rows)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryPointStore":
        payload = json.loads(Path(path).read_text())
        if not isinstance(payload, list):
            raise ValidationError(f"{path}: expected a list of pings")
        return cls.from_rows(_normalize_row(item) for item in payload)

    def fetch_all(self) -> List[GeoPoint]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)


def _normalize_row(item: Any) -> Sequence[Any]:
    if isinstance(item, dict):
        try:
            return item["lat"], item["lon"], item["ts"]
        except KeyError as exc:
            raise ValidationError(f"ping object missing key {exc}") from exc
    if isinstance(item, (list, tuple)):
        return item
    raise ValidationError(f"unsupported ping entry {item!r}")
