from __future__ import annotations

import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import typer

from pingmap.domain.models import GeoPoint

app = typer.Typer(help="Generate demo pings around a city centre")

# ~0.002 degrees keeps a group well inside the default eps of 1.5.
SPREAD_DEG = 0.002
HOTSPOT_OFFSETS_DEG = [(0.0, 0.0), (4.0, 4.0), (-4.0, 3.0), (3.0, -4.0)]


def generate_demo_pings(
    lat: float,
    lon: float,
    *,
    now: Optional[datetime] = None,
    hotspots: int = 3,
    per_hotspot: int = 12,
    noise: int = 5,
    seed: int = 7,
) -> List[GeoPoint]:
    """Build ``hotspots`` dense groups, each split across both time windows.

    Even-numbered hotspots are stamped in the past (older than two hours),
    odd ones in the recent window, plus ``noise`` isolated pings.
    """
    if hotspots < 0 or per_hotspot < 0 or noise < 0:
        raise ValueError("hotspots, per_hotspot and noise must be >= 0")
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    old_ts = int((now - timedelta(hours=3)).timestamp())
    recent_ts = int((now - timedelta(minutes=30)).timestamp())

    points: List[GeoPoint] = []
    for idx in range(hotspots):
        d_lat, d_lon = HOTSPOT_OFFSETS_DEG[idx % len(HOTSPOT_OFFSETS_DEG)]
        base_ts = old_ts if idx % 2 == 0 else recent_ts
        for _ in range(per_hotspot):
            points.append(
                GeoPoint(
                    latitude=lat + d_lat + rng.uniform(-SPREAD_DEG, SPREAD_DEG),
                    longitude=lon + d_lon + rng.uniform(-SPREAD_DEG, SPREAD_DEG),
                    timestamp=base_ts - rng.randint(0, 600),
                )
            )
    for idx in range(noise):
        points.append(
            GeoPoint(
                latitude=lat + 10.0 + idx * 5.0,
                longitude=lon - 10.0 - idx * 5.0,
                timestamp=recent_ts,
            )
        )
    return points


def write_pings_json(points: List[GeoPoint], path: str | Path) -> Path:
    target = Path(path)
    target.write_text(json.dumps([[p.latitude, p.longitude, p.timestamp] for p in points], indent=2))
    return target


@app.command()
def cli(
    output: Path = typer.Option(..., help="Destination JSON file"),
    lat: float = typer.Option(40.4168, help="Latitude"),
    lon: float = typer.Option(-3.7038, help="Longitude"),
    hotspots: int = typer.Option(3, help="Dense groups to generate"),
    per_hotspot: int = typer.Option(12, help="Pings per group"),
    noise: int = typer.Option(5, help="Isolated pings"),
    seed: int = typer.Option(7, help="Random seed"),
):
    points = generate_demo_pings(lat, lon, hotspots=hotspots, per_hotspot=per_hotspot, noise=noise, seed=seed)
    write_pings_json(points, output)
    print(f"[generate_demo_pings] output={output} hotspots={hotspots} per_hotspot={per_hotspot} noise={noise} total={len(points)}")


if __name__ == "__main__":
    app()
