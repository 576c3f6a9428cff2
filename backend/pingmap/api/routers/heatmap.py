from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pingmap.api.deps import get_pipeline
from pingmap.domain.errors import ConfigurationError, ResolutionError, ValidationError
from pingmap.domain.models import Origin
from pingmap.services.heatmap_pipeline import HeatmapPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["heatmap"])


@router.get("/heatmap")
def get_heatmap(
    lat: Optional[str] = Query(None, description="Latitude of the query origin"),
    long: Optional[str] = Query(None, description="Longitude of the query origin"),
    pipeline: HeatmapPipeline = Depends(get_pipeline),
):
    try:
        origin = Origin.parse(lat, long)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        result = pipeline.run(origin)
    except ResolutionError as exc:
        logger.error("heatmap request aborted: %s", exc)
        raise HTTPException(status_code=502, detail=f"Locality resolution failed: {exc}") from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return result.to_payload()
