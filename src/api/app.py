"""FastAPI application exposing decay scores for the watchlist."""
from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import get_config
from src.core.interfaces import DecayTier
from src.core.logger import get_logger
from src.orchestrator.pipeline import DecayPipeline, build_pipeline

from .models import CronResponse, TickerAnalysisResponse, WatchlistResponse

log = get_logger(__name__)


def create_app(pipeline_factory: Optional[Callable[[], DecayPipeline]] = None) -> FastAPI:
    """Build the API; the pipeline is created lazily on the first request."""
    app = FastAPI(
        title="Corporate Decay API",
        description="Decay scores and severity tiers for a fixed equity watchlist.",
        version="1.0.0",
    )

    config = get_config()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get("api.allowed_origins", ["*"]),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    factory = pipeline_factory or build_pipeline
    holder: dict[str, DecayPipeline] = {}
    holder_lock = threading.Lock()

    def get_pipeline() -> DecayPipeline:
        with holder_lock:
            if "pipeline" not in holder:
                try:
                    holder["pipeline"] = factory()
                except Exception as e:
                    log.exception(f"Pipeline setup failed: {e}")
                    raise HTTPException(
                        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                        detail=str(e) or "Pipeline setup failed",
                    )
            return holder["pipeline"]

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok"}

    @app.get(
        "/api/analyze",
        response_model=Union[TickerAnalysisResponse, WatchlistResponse],
        tags=["Analysis"],
    )
    def analyze(
        ticker: Optional[str] = Query(None, description="Single ticker; omit for the whole watchlist"),
        pipeline: DecayPipeline = Depends(get_pipeline),
    ):
        try:
            if ticker:
                log.info(f"Handling /api/analyze for {ticker.upper()}")
                return pipeline.analyze_ticker(ticker.upper()).to_dict()

            log.info("Handling /api/analyze for the whole watchlist")
            analyses = sorted(pipeline.analyze_watchlist(), key=lambda a: a.score, reverse=True)
        except Exception as e:
            log.exception(f"Analysis failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e) or "Analysis failed",
            )

        return {
            "timestamp": datetime.now(timezone.utc),
            "total": len(analyses),
            "critical": sum(1 for a in analyses if a.tier == DecayTier.CRITICAL),
            "warning": sum(1 for a in analyses if a.tier == DecayTier.WARNING),
            "results": [a.to_dict() for a in analyses],
        }

    @app.get("/api/cron", response_model=CronResponse, tags=["Jobs"])
    def cron(pipeline: DecayPipeline = Depends(get_pipeline)):
        log.info("Corporate Decay cron job started")
        try:
            result = pipeline.run(send_alerts=True)
        except Exception as e:
            log.exception(f"Cron job failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e) or "Cron job failed",
            )

        summary = result.to_summary()
        log.info(f"Cron completed: {summary['analyzed']} analyzed, {summary['alerts_sent']} alerts sent")
        return summary

    return app
