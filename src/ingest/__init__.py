"""
Data Ingest Layer

외부 시세 API에서 원시 데이터 수집
"""
from src.ingest.base import BaseDataFetcher
from src.ingest.price_fetcher import (
    PriceHistory,
    YahooFinanceFetcher,
    calculate_volatility,
    estimate_volatility,
    parse_chart_payload,
    parse_short_interest_payload,
)

__all__ = [
    "BaseDataFetcher",
    "PriceHistory",
    "YahooFinanceFetcher",
    "calculate_volatility",
    "estimate_volatility",
    "parse_chart_payload",
    "parse_short_interest_payload",
]
