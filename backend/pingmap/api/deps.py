from __future__ import annotations

from fastapi import HTTPException, Request

from pingmap.services.heatmap_pipeline import HeatmapPipeline


def get_pipeline(request: Request) -> HeatmapPipeline:
    pipeline = getattr(request.app.state, "heatmap_pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=500, detail="Heatmap pipeline not configured")
    return pipeline
