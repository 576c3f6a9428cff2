import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from pingmap.config import Settings
from pingmap.domain.errors import PingmapError
from pingmap.domain.models import Origin
from pingmap.infra.points.memory_store import InMemoryPointStore
from pingmap.jobs.generate_demo_pings import generate_demo_pings, write_pings_json
from pingmap.jobs.import_pings import import_pings_from_csv
from pingmap.services.bootstrap import build_resolver, build_store
from pingmap.services.heatmap_pipeline import HeatmapPipeline

app = typer.Typer(help="CLI for the ping heatmap")


@app.command("heatmap")
def cli_heatmap(
    lat: Optional[str] = typer.Option(None, help="Origin latitude"),
    long: Optional[str] = typer.Option(None, help="Origin longitude"),
    pings_file: Optional[Path] = typer.Option(None, help="JSON file with [lat, lon, ts] pings"),
    now: Optional[str] = typer.Option(None, help="Reference time, ISO 8601 (defaults to now)"),
):
    try:
        settings = Settings.from_env()
        origin = Origin.parse(lat, long)
        store = InMemoryPointStore.from_json_file(pings_file) if pings_file else build_store(settings)
        pipeline = HeatmapPipeline.from_settings(settings, store, build_resolver(settings))
        reference = _parse_now(now)
        result = pipeline.run(origin, now=reference)
    except PingmapError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))


@app.command("import")
def cli_import(
    csv_path: Path = typer.Argument(..., help="CSV with lat,lon,ts columns"),
    database_url: Optional[str] = typer.Option(None, help="Overrides DATABASE_URL"),
):
    try:
        inserted = import_pings_from_csv(csv_path, database_url=database_url)
    except PingmapError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"inserted={inserted}")


@app.command("demo")
def cli_demo(
    output: Path = typer.Option(..., help="Destination JSON file"),
    lat: float = typer.Option(40.4168, help="Latitude"),
    lon: float = typer.Option(-3.7038, help="Longitude"),
    seed: int = typer.Option(7, help="Random seed"),
):
    points = generate_demo_pings(lat, lon, seed=seed)
    write_pings_json(points, output)
    typer.echo(f"wrote {len(points)} pings to {output}")


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    if value.endswith("Z"):
        value = value.replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid --now value: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


if __name__ == "__main__":
    app()
