"""
Orchestrator: 감시 종목 평가 파이프라인
"""
from src.orchestrator.pipeline import (
    DecayPipeline,
    PipelineResult,
    TickerAnalysis,
    build_coordinator,
    build_pipeline,
)

__all__ = [
    "DecayPipeline",
    "PipelineResult",
    "TickerAnalysis",
    "build_coordinator",
    "build_pipeline",
]
