from __future__ import annotations

import csv
import os
from pathlib import Path
from typing import Iterator, Optional

import typer
from sqlalchemy import create_engine

from pingmap.domain.errors import ValidationError
from pingmap.domain.models import GeoPoint
from pingmap.infra.db.pings_repository import PingsRepository
from pingmap.infra.db.tables import metadata

app = typer.Typer(help="Import pings from a CSV file into the pings table")

REQUIRED_COLUMNS = ("lat", "lon", "ts")


def import_pings_from_csv(
    csv_path: str | Path,
    *,
    engine=None,
    database_url: Optional[str] = None,
) -> int:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    if engine is None:
        if database_url is None:
            database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise RuntimeError("DATABASE_URL required if engine not provided")
        engine = create_engine(database_url, future=True)
    metadata.create_all(engine)
    repo = PingsRepository(engine)

    points = list(_read_points(path))
    inserted = repo.insert_many(points)
    db_url = getattr(engine, "url", database_url)
    print(f"[import_pings] Import complete database={db_url} file={path.name} inserted={inserted}")
    return inserted


def _read_points(path: Path) -> Iterator[GeoPoint]:
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        missing = [col for col in REQUIRED_COLUMNS if col not in (reader.fieldnames or [])]
        if missing:
            raise ValidationError(f"{path.name}: missing columns {', '.join(missing)}")
        for line_no, row in enumerate(reader, start=2):
            try:
                yield GeoPoint.from_row([row["lat"], row["lon"], row["ts"]])
            except ValidationError as exc:
                raise ValidationError(f"{path.name}:{line_no}: {exc}") from exc


@app.command()
def run(
    csv_path: Path = typer.Argument(..., help="CSV with lat,lon,ts columns"),
    database_url: Optional[str] = typer.Option(None, help="Overrides DATABASE_URL"),
):
    import_pings_from_csv(csv_path, database_url=database_url)


if __name__ == "__main__":
    app()
