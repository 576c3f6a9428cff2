from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pingmap.api.routers import heatmap
from pingmap.config import Settings
from pingmap.services.bootstrap import build_pipeline
from pingmap.services.heatmap_pipeline import HeatmapPipeline

logger = logging.getLogger(__name__)


def create_app(pipeline: Optional[HeatmapPipeline] = None, settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="Ping Heatmap API", version="0.1.0")
    settings = settings or Settings.from_env()
    if pipeline is None:
        if settings.google_api_key:
            pipeline = build_pipeline(settings)
        else:
            logger.warning("GOOGLE_MAPS_API_KEY not set; /api/heatmap will answer 500")
    app.state.heatmap_pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(heatmap.router, prefix="/api")
    return app


app = create_app()
