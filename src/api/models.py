"""Response models for the read API."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PriceSnapshot(BaseModel):
    current: float
    change_1m: float = Field(..., description="1-month price change in percent")
    change_3m: float = Field(..., description="3-month price change in percent")
    pct_from_high: float = Field(..., description="Distance from the 52-week high in percent")
    volume_ratio: float = Field(..., description="Current volume over 20-day average volume")


class TickerAnalysisResponse(BaseModel):
    ticker: str
    timestamp: datetime
    price: Optional[PriceSnapshot]
    short_interest: Optional[float]
    volatility: Optional[float]
    signals: Dict[str, int]
    score: int = Field(..., ge=0, le=100)
    level: str
    emoji: str


class WatchlistResponse(BaseModel):
    timestamp: datetime
    total: int
    critical: int
    warning: int
    results: List[TickerAnalysisResponse]


class CronResponse(BaseModel):
    success: bool
    timestamp: datetime
    analyzed: int
    alerts_sent: int
    critical: List[str]
    warning: List[str]
